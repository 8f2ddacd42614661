"""
Import/export façade — CSV and JSON against the record store.
"""

import json

import pytest

from core.base import ImportFormat
from core.errors import TransportError, ValidationError
from modules.inventory.transfer import EXPORT_COLUMNS, export_all, import_batch
from modules.inventory.store import RecordStore

CSV_HEADER = ",".join(EXPORT_COLUMNS)

FULL_CSV = (
    CSV_HEADER + "\n"
    '"Galaxy Black, Matte",Prusament,1,Galaxy Black,#1a1a1a,1.75,215,1,80,2024-03-01,29.9,'
    "opened,spooled,2,2024-05-02,Shelf A\n"
    "Jade White,Bambu Lab,2,Jade White,#ffffff,1.75,,0.75,100,,,sealed,spoolless,0,,\n"
)


def test_csv_import_counts_every_data_row(db, owner):
    store = RecordStore(db)
    text = "name,material,totalWeight\nA,1,1\nB,1,1\n,1,1\nC,1,-3\n\n"
    outcome = import_batch(store, text, ImportFormat.CSV, owner.scope)
    assert (outcome.created, outcome.duplicates, outcome.errors) == (2, 0, 2)
    assert outcome.total == 4


def test_importing_the_same_csv_twice(db, owner):
    store = RecordStore(db)
    first = import_batch(store, FULL_CSV, ImportFormat.CSV, owner.scope)
    second = import_batch(store, FULL_CSV, ImportFormat.CSV, owner.scope)
    assert (first.created, first.duplicates) == (2, 0)
    assert (second.created, second.duplicates) == (0, 2)


def test_blank_cells_take_import_defaults(db, owner):
    store = RecordStore(db)
    import_batch(store, "name,material,totalWeight,remainingPercentage,dryerCount\nX,PETG,,,\n",
                 ImportFormat.CSV, owner.scope)
    (record,) = store.list(owner.scope)
    assert (record.total_weight, record.remaining_percentage, record.dryer_count) == (1, 100, 0)


def test_headerless_csv_reads_export_column_order(db, owner):
    store = RecordStore(db)
    outcome = import_batch(store, "Plain Spool,Generic,3,Red,#ff0000,2.85\n", ImportFormat.CSV, owner.scope)
    assert outcome.created == 1
    (record,) = store.list(owner.scope)
    assert (record.manufacturer, record.material, record.color_code, record.diameter) == ("Generic", "3", "#ff0000", 2.85)


def test_import_dedups_against_owner_records_only(db, owner, other_owner):
    store = RecordStore(db)
    import_batch(store, "name,material\nShared Name,1\n", ImportFormat.CSV, other_owner.scope)
    outcome = import_batch(store, "name,material\nshared name,1\n", ImportFormat.CSV, owner.scope)
    assert outcome.created == 1


def test_empty_csv_is_rejected(db, owner):
    with pytest.raises(ValidationError):
        import_batch(RecordStore(db), "   \n", ImportFormat.CSV, owner.scope)


def test_json_import_accepts_string_or_array(db, owner):
    store = RecordStore(db)
    items = [{"name": "J1", "material": "1"}, {"name": "J2", "material": "1", "remainingPercentage": 140}, "junk"]
    outcome = import_batch(store, json.dumps(items), ImportFormat.JSON, owner.scope)
    assert (outcome.created, outcome.errors) == (1, 2)
    outcome = import_batch(store, [{"name": "J3", "material": "2"}], ImportFormat.JSON, owner.scope)
    assert outcome.created == 1


@pytest.mark.parametrize("raw", ["{not json", '{"name": "object, not array"}'])
def test_json_import_transport_errors(db, owner, raw):
    with pytest.raises(TransportError):
        import_batch(RecordStore(db), raw, ImportFormat.JSON, owner.scope)


def test_csv_export_header_and_quoting(db, owner):
    store = RecordStore(db)
    import_batch(store, FULL_CSV, ImportFormat.CSV, owner.scope)
    lines = export_all(store, owner.scope, ImportFormat.CSV).splitlines()
    assert lines[0] == CSV_HEADER
    assert lines[1].startswith('"Galaxy Black, Matte",Prusament,1,')
    assert len(lines) == 3


def test_csv_round_trip_into_empty_store(db, owner, other_owner):
    store = RecordStore(db)
    import_batch(store, FULL_CSV, ImportFormat.CSV, owner.scope)
    exported = export_all(store, owner.scope, ImportFormat.CSV)

    outcome = import_batch(store, exported, ImportFormat.CSV, other_owner.scope)
    assert outcome.created == 2

    def fields(scope):
        return json.loads(export_all(store, scope, ImportFormat.JSON))

    assert fields(other_owner.scope) == fields(owner.scope)


def test_json_export_is_pretty_printed(db, owner):
    store = RecordStore(db)
    import_batch(store, FULL_CSV, ImportFormat.CSV, owner.scope)
    text = export_all(store, owner.scope, ImportFormat.JSON)
    rows = json.loads(text)
    assert text.startswith("[\n  {")
    assert list(rows[0]) == EXPORT_COLUMNS
    assert rows[0]["purchaseDate"] == "2024-03-01"
    assert rows[1]["spoolType"] == "spoolless"


def test_json_snake_case_values_beat_import_defaults(db, owner):
    store = RecordStore(db)
    items = [{"name": "Snake", "material": "1", "total_weight": 2.5,
              "remaining_percentage": 40, "dryer_count": 3}]
    assert import_batch(store, items, ImportFormat.JSON, owner.scope).created == 1
    (record,) = store.list(owner.scope)
    assert (record.total_weight, record.remaining_percentage, record.dryer_count) == (2.5, 40, 3)


@pytest.mark.parametrize("tail", ["Location A", "Shelf 1"])
def test_headerless_first_row_is_never_taken_for_a_header(db, owner, tail):
    store = RecordStore(db)
    text = (
        f"Red PLA,Prusament,1,Red,#ff0000,1.75,215,1,80,,,opened,spooled,0,,{tail}\n"
        "Blue PLA,BrandX,1,Blue,#0000ff,1.75,215,1,80,,,opened,spooled,0,,Location B\n"
    )
    outcome = import_batch(store, text, ImportFormat.CSV, owner.scope)
    assert (outcome.created, outcome.total) == (2, 2)
    assert sorted(r.name for r in store.list(owner.scope)) == ["Blue PLA", "Red PLA"]


def test_vendor_and_location_headers_still_bind(db, owner):
    store = RecordStore(db)
    import_batch(store, "name,material,vendor,location\nTagged,1,BrandX,Shelf B\n", ImportFormat.CSV, owner.scope)
    (record,) = store.list(owner.scope)
    assert (record.manufacturer, record.storage_location) == ("BrandX", "Shelf B")
