# prep_instructions/K_tests/K11_test_master_sequence.py
"""Tests for the master sequence lookup."""
import logging

import pytest

from A_core.A00_logging import ROOT_LOGGER_NAME
from A_core.A04_exceptions import ReferenceDataError
from F_reference.F01_master_sequence import MasterSequence

HEADER = "bowelprep,order,category,message,offset,time,split,procedure_time\n"


class TestShippedSequence:
    def test_lookup_sorted_by_order(self, master_sequence_path):
        steps = MasterSequence(master_sequence_path).lookup("plenvu", "morning")
        assert [s.order for s in steps] == list(range(1, len(steps) + 1))
        assert steps[0].category == "medication"
        assert all(s.bowelprep == "plenvu" and s.procedure_time == "morning" for s in steps)

    def test_lookup_case_insensitive(self, master_sequence_path):
        master = MasterSequence(master_sequence_path)
        assert master.lookup(" MoviPrep ", "AFTERNOON") == master.lookup("moviprep", "afternoon")

    def test_available_options(self, master_sequence_path):
        options = MasterSequence(master_sequence_path).available_options()
        assert ("plenvu", "morning") in options
        assert ("moviprep", "afternoon") in options
        assert options == sorted(options)

    def test_unknown_pair_is_empty(self, master_sequence_path):
        assert MasterSequence(master_sequence_path).lookup("picolax", "morning") == []


class TestLoading:
    def test_rows_sorted_within_regimen(self, tmp_path):
        path = tmp_path / "seq.csv"
        path.write_text(
            HEADER
            + 'plenvu,3,diet,"Third",-1,8,false,morning\n'
            + 'plenvu,1,medication,"First",-5,9,false,morning\n'
            + 'plenvu,2,bowelprep,"Second",-3,9,false,morning\n',
            encoding="utf-8",
        )
        steps = MasterSequence(path).lookup("plenvu", "morning")
        assert [s.message for s in steps] == ["First", "Second", "Third"]

    def test_loaded_once(self, tmp_path):
        path = tmp_path / "seq.csv"
        path.write_text(HEADER + 'plenvu,1,diet,"Eat rice",-2,8,false,morning\n', encoding="utf-8")
        master = MasterSequence(path)
        assert len(master) == 1
        path.unlink()
        assert len(master.lookup("plenvu", "morning")) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(ReferenceDataError):
            MasterSequence(tmp_path / "absent.csv").available_options()

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "seq.csv"
        path.write_text("bowelprep,message\nplenvu,hi\n", encoding="utf-8")
        with pytest.raises(ReferenceDataError) as exc:
            MasterSequence(path).lookup("plenvu", "morning")
        assert "order" in exc.value.message

    def test_unknown_prep_row_skipped(self, tmp_path, caplog):
        path = tmp_path / "seq.csv"
        path.write_text(
            HEADER
            + 'plenvu,1,diet,"Eat rice",-2,8,false,morning\n'
            + 'colonlytely,1,diet,"Eat rice",-2,8,false,morning\n',
            encoding="utf-8",
        )
        with caplog.at_level(logging.WARNING, logger=ROOT_LOGGER_NAME):
            master = MasterSequence(path)
            assert len(master) == 1
        assert master.available_options() == [("plenvu", "morning")]
        assert "row 3" in caplog.text

    def test_unknown_procedure_time_row_skipped(self, tmp_path):
        path = tmp_path / "seq.csv"
        path.write_text(HEADER + 'plenvu,1,diet,"Eat rice",-2,8,false,evening\n', encoding="utf-8")
        assert MasterSequence(path).available_options() == []

    def test_bad_row_does_not_hide_valid_rows(self, tmp_path):
        path = tmp_path / "seq.csv"
        path.write_text(
            HEADER
            + 'plenvu,1,medication,"Stop iron tablets",-5,9,false,morning\n'
            + 'colonlytely,1,diet,"Eat rice",-2,8,false,morning\n'
            + 'plenvu,2,diet,"Start the low residue diet",abc,xx,false,morning\n',
            encoding="utf-8",
        )
        steps = MasterSequence(path).lookup("plenvu", "morning")
        assert [s.order for s in steps] == [1, 2]
        assert steps[1].offset == 0
        assert steps[1].time is None

