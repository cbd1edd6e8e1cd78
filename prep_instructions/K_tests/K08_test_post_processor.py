# prep_instructions/K_tests/K08_test_post_processor.py
"""Tests for reference matching and the ordering/completeness pass."""
from A_core.A01_instruction_models import Instruction
from A_core.A03_heuristics_config import HeuristicsConfig, RequiredStep
from E_normalization.E01_reference_matcher import apply_reference, match_reference
from E_normalization.E02_post_processor import post_process, sort_instructions


def _inst(order, offset, category="procedure", **kw):
    return Instruction(order=order, offset=offset, category=category, message=f"step {order}", **kw)


class TestReferenceMatcher:
    def test_match_case_insensitive(self, heuristics):
        ref = match_reference("PLEASE START THE LOW RESIDUE DIET today", heuristics)
        assert (ref.offset, ref.category) == (-2, "diet")

    def test_match_across_line_breaks(self, heuristics):
        ref = match_reference("You may have a\nlight breakfast", heuristics)
        assert ref.offset == -1

    def test_no_match(self, heuristics):
        assert match_reference("Drink water", heuristics) is None
        assert match_reference("", heuristics) is None

    def test_apply_returns_updated_copy(self, heuristics):
        inst = Instruction(message="A reminder to purchase your kit", offset=0, category="diet")
        pinned = apply_reference(inst, heuristics)
        assert (pinned.offset, pinned.category) == (-3, "bowelprep")
        assert (inst.offset, inst.category) == (0, "diet")

    def test_apply_without_match_is_identity(self, heuristics):
        inst = Instruction(message="Drink water")
        assert apply_reference(inst, heuristics) is inst


class TestSort:
    def test_offset_descending_then_order(self):
        items = [_inst(1, -7), _inst(2, 0), _inst(3, -1), _inst(4, 0)]
        assert [i.order for i in sort_instructions(items)] == [2, 4, 3, 1]


class TestPostProcess:
    def test_renumbers_densely(self, heuristics):
        items = [
            _inst(5, -7, "medication"),
            _inst(9, -2, "diet"),
            _inst(2, 0, "procedure"),
        ]
        result = post_process(items, heuristics)
        assert [(i.order, i.offset) for i in result] == [(1, 0), (2, -2), (3, -7)]

    def test_does_not_mutate_input(self, heuristics):
        items = [_inst(3, -7, "medication")]
        post_process(items, heuristics)
        assert items[0].order == 3

    def test_empty_input_gets_required_steps(self, heuristics):
        result = post_process([], heuristics)
        assert [(i.order, i.category, i.offset, i.time) for i in result] == [
            (1, "medication", -5, 9.0),
            (2, "diet", -2, 9.0),
            (3, "procedure", 0, 7.0),
        ]
        assert result[0].bowelprep == "plenvu"

    def test_injected_steps_appended_unsorted(self, heuristics):
        items = [_inst(1, 0, "procedure"), _inst(2, -6, "medication")]
        result = post_process(items, heuristics)
        # diet (-2) is appended after the -6 medication step
        assert [(i.order, i.category, i.offset) for i in result] == [
            (1, "procedure", 0),
            (2, "medication", -6),
            (3, "diet", -2),
        ]
        assert result[-1].message == "Please start the low residue diet and only drink recommended clear fluids."

    def test_injected_copy_document_flags(self, heuristics):
        items = [_inst(1, 0, "procedure", bowelprep="moviprep", split=True, procedure_time="afternoon")]
        result = post_process(items, heuristics)
        injected = result[1:]
        assert {i.bowelprep for i in injected} == {"moviprep"}
        assert {i.split for i in injected} == {True}
        assert {i.procedure_time for i in injected} == {"afternoon"}

    def test_requirement_uses_at_or_before(self, heuristics):
        # medication on day -3 does not satisfy "by day -5"
        items = [_inst(1, -3, "medication"), _inst(2, -2, "diet"), _inst(3, 0, "procedure")]
        result = post_process(items, heuristics)
        assert [(i.category, i.offset) for i in result[3:]] == [("medication", -5)]

    def test_complete_list_only_renumbered(self, heuristics):
        items = [_inst(1, -5, "medication"), _inst(2, -2, "diet"), _inst(3, 0, "procedure")]
        result = post_process(items, heuristics)
        assert len(result) == 3
        assert post_process(result, heuristics) == result

    def test_completeness_and_dense_order(self, heuristics):
        result = post_process([_inst(1, 3, "diet")], heuristics)
        assert [i.order for i in result] == list(range(1, len(result) + 1))
        assert any(i.category == "medication" and i.offset <= -5 for i in result)
        assert any(i.category == "diet" and i.offset <= -2 for i in result)
        assert any(i.category == "procedure" and i.offset <= 0 for i in result)

    def test_custom_required_steps(self):
        config = HeuristicsConfig(required_steps=[RequiredStep("bowelprep", -1, "Buy your kit", 12)])
        result = post_process([], config)
        assert [(i.category, i.offset, i.time, i.message) for i in result] == [
            ("bowelprep", -1, 12.0, "Buy your kit")
        ]
