"""Application tests for storage type repositioning and the location grid."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from stockroom.storage.layout import bulk_reposition, storage_type_grid
from stockroom.storage.management import DeactivateStorageType, RepositionStorageType
from stockroom.storage.storage_type import StorageType


@pytest.fixture()
def location_id(make_location):
    return make_location()


def _reposition(storage_type_id, row_position, column_position):
    command = RepositionStorageType(
        storage_type_id=storage_type_id, row_position=row_position, column_position=column_position
    )
    current_domain.process(command, asynchronous=False)
    return current_domain.repository_for(StorageType).get(storage_type_id)


class TestReposition:
    def test_reposition_persists(self, location_id, make_storage_type):
        storage_type_id = make_storage_type(location_id=location_id)
        storage_type = _reposition(storage_type_id, 0, 3)
        assert (storage_type.row_position, storage_type.column_position) == (0, 3)

    def test_reposition_unknown_storage_type(self):
        with pytest.raises(ObjectNotFoundError):
            _reposition("missing", 0, 0)


class TestGrid:
    def test_grid_orders_cells_by_row_then_column(self, location_id, make_storage_type):
        back = make_storage_type(location_id=location_id, code="BACK", row_position=1, column_position=0)
        corner = make_storage_type(location_id=location_id, code="CORNER", row_position=0, column_position=2)
        front = make_storage_type(location_id=location_id, code="FRONT", row_position=0, column_position=0)
        loose = make_storage_type(location_id=location_id, code="LOOSE")

        grid = storage_type_grid(location_id)

        assert [str(cell.id) for cell in grid["cells"]] == [front, corner, back]
        assert [str(storage_type.id) for storage_type in grid["unplaced"]] == [loose]
        assert (grid["rows"], grid["columns"]) == (2, 3)

    def test_grid_skips_inactive_storage_types(self, location_id, make_storage_type):
        retired = make_storage_type(location_id=location_id, code="OLD", row_position=4, column_position=4)
        current_domain.process(DeactivateStorageType(storage_type_id=retired), asynchronous=False)

        grid = storage_type_grid(location_id)
        assert grid["cells"] == []
        assert (grid["rows"], grid["columns"]) == (0, 0)
        assert len(storage_type_grid(location_id, active_only=False)["cells"]) == 1

    def test_grid_for_unknown_location(self):
        with pytest.raises(ObjectNotFoundError):
            storage_type_grid("missing")


class TestBulkReposition:
    def test_each_update_applies_independently(self, location_id, make_storage_type):
        first = make_storage_type(location_id=location_id, code="SH-1")
        second = make_storage_type(location_id=location_id, code="SH-2")

        result = bulk_reposition(
            [
                {"storage_type_id": first, "row_position": 0, "column_position": 1},
                {"storage_type_id": "missing", "row_position": 0, "column_position": 0},
                {"storage_type_id": second, "row_position": -1, "column_position": 0},
            ]
        )

        assert result["updated"] == [first]
        assert [(error["storage_type_id"], error["error"]) for error in result["errors"]] == [
            ("missing", "ObjectNotFoundError"),
            (second, "ValidationError"),
        ]
        assert result["message"] == "Repositioned 1 of 3 storage types"

        repo = current_domain.repository_for(StorageType)
        assert repo.get(first).column_position == 1
        assert repo.get(second).row_position is None
