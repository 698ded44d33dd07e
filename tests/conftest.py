import pytest

from powerwhip.loader import load_rules
from powerwhip.lookup import LookupRow, LookupTable


def _row(receptacle, conduit, whip, tail, color, size, awg, green, voltage, box,
         phase, count, current, part, base, assembled, list_price):
    return LookupRow(
        receptacle=receptacle, cable_conduit_type=conduit, whip_length=whip,
        tail_length=tail, label_color=color, conduit_size=size, conductor_awg=awg,
        green_awg=green, voltage=voltage, box_type=box, phase_type=phase,
        conductor_count=count, current=current, orderable_part_number=part,
        base_price=base, assembled_price=assembled, list_price=list_price,
    )


SAMPLE_ROWS = (
    _row("CS8269A", "LMZC", "20", "10", "Red", "3/4", "6", "8", "208", "IP67",
         "3 phase", "5", "60", "CS8269A-LMZC-20-10-RED", 125.50, 180.75, 225.00),
    _row("460C9W", "LMZC", "20", "10", "Orange", "3/4", "6", "8", "480", "IP67",
         "3 phase", "5", "60", "460C9W-LMZC-20-10-ORG", 130.25, 185.50, 230.00),
    _row("L6-15R", "LMZC", "30", "15", "Blue", "1/2", "12", "12", "250", "NEMA",
         "2 phase", "3", "15", "L6-15R-LMZC-30-15-BLU", 85.00, 125.00, 155.00),
    _row("L6-20R", "LMZC", "25", "12", "Yellow", "1/2", "12", "12", "250", "NEMA",
         "2 phase", "3", "20", "L6-20R-LMZC-25-12-YEL", 90.00, 130.00, 160.00),
    _row("L6-30R", "LMZC", "40", "18", "Purple", "3/4", "10", "10", "250", "NEMA",
         "2 phase", "3", "30", "L6-30R-LMZC-40-18-PUR", 110.00, 155.00, 190.00),
)


@pytest.fixture
def sample_table():
    return LookupTable(rows=SAMPLE_ROWS, source_file="MasterBubbleUpLookup.xlsx")


@pytest.fixture(scope="session")
def rules():
    return load_rules()


class FakeUpload:
    """Stands in for a Streamlit UploadedFile."""

    def __init__(self, name: str, data: bytes):
        self.name = name
        self._data = data
        self.size = len(data)

    def getvalue(self) -> bytes:
        return self._data


@pytest.fixture
def make_upload():
    return FakeUpload
