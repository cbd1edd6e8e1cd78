# prep_instructions/K_tests/K10_test_csv_export.py
"""Tests for instruction CSV serialization."""
import pytest

from A_core.A01_instruction_models import Instruction
from A_core.A04_exceptions import ExportError, ParsingError
from J_export.J01_csv_export import (
    COLUMNS,
    format_time,
    instructions_from_csv,
    instructions_to_csv,
    read_instructions_csv,
    write_instructions_csv,
)


@pytest.fixture
def instructions():
    return [
        Instruction(
            bowelprep="moviprep", order=1, category="bowelprep",
            message='At 6pm drink "sachet A", then water', offset=-1, time=18.0,
            split=True, procedure_time="afternoon",
        ),
        Instruction(order=2, category="procedure", message="Arrive early", offset=0, time=None),
        Instruction(order=3, category="diet", message="Low residue diet", offset=-2, time=6 + 20 / 60),
    ]


class TestFormatting:
    def test_header(self, instructions):
        assert instructions_to_csv(instructions).splitlines()[0] == ",".join(COLUMNS)

    def test_message_always_quoted(self, instructions):
        lines = instructions_to_csv(instructions).splitlines()
        assert lines[1] == 'moviprep,1,bowelprep,"At 6pm drink ""sachet A"", then water",-1,18,true,afternoon'
        assert lines[2] == 'plenvu,2,procedure,"Arrive early",0,,false,morning'

    @pytest.mark.parametrize("time,expected", [(None, ""), (7.0, "7"), (18.5, "18.5"), (0.0, "0")])
    def test_format_time(self, time, expected):
        assert format_time(time) == expected

    def test_empty_list(self):
        assert instructions_to_csv([]) == ",".join(COLUMNS) + "\n"


class TestRoundTrip:
    def test_text_round_trip(self, instructions):
        assert instructions_from_csv(instructions_to_csv(instructions)) == instructions

    def test_file_round_trip(self, instructions, tmp_path):
        path = write_instructions_csv(instructions, tmp_path / "nested" / "out.csv")
        assert path.exists()
        assert read_instructions_csv(path) == instructions
        # no temporary files left beside the output
        assert [p.name for p in path.parent.iterdir()] == ["out.csv"]


class TestReading:
    def test_lenient_values(self):
        text = (
            "bowelprep,order,category,message,offset,time,split,procedure_time\n"
            'unknownprep,x,Diet,"  Eat   rice ",-12,25,TRUE,evening\n'
        )
        [inst] = instructions_from_csv(text)
        assert inst.bowelprep == "plenvu"
        assert inst.order == 1
        assert inst.category == "diet"
        assert inst.message == "Eat rice"
        assert inst.offset == -7
        assert inst.time == 23.99
        assert inst.split is True
        assert inst.procedure_time == "morning"

    def test_blank_rows_skipped(self):
        text = ",".join(COLUMNS) + "\n\n" + 'plenvu,1,diet,"Eat rice",-2,8,false,morning\n,,,,,,,\n'
        assert len(instructions_from_csv(text)) == 1

    def test_missing_columns(self):
        with pytest.raises(ParsingError) as exc:
            instructions_from_csv("bowelprep,order,message\nplenvu,1,hi\n")
        assert "category" in exc.value.message

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParsingError):
            read_instructions_csv(tmp_path / "absent.csv")


class TestWriting:
    def test_unwritable_destination(self, instructions, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(ExportError) as exc:
            write_instructions_csv(instructions, blocker / "out.csv")
        assert exc.value.file_path == str(blocker / "out.csv")

    def test_overwrites_existing(self, instructions, tmp_path):
        path = tmp_path / "out.csv"
        path.write_text("old", encoding="utf-8")
        write_instructions_csv(instructions[:1], path)
        assert len(read_instructions_csv(path)) == 1
