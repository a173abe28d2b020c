"""
Tests for reading and writing inventories as CSV, JSON and Excel.
"""
import json
import pytest

from forest_inventory import (
    DataError,
    InvalidDataError,
    TreeStatus,
    load_inventory,
    read_csv,
    read_csv_from_bytes,
    read_excel,
    read_excel_from_bytes,
    read_json,
    read_json_from_bytes,
    save_inventory,
    validate_csv_rows,
    write_csv,
    write_excel,
    write_json,
)
from forest_inventory.inventory_io import DEFAULT_PLOT_SIZE_ACRES, inventory_to_dataframe

HEADER = ("plot_id,tree_id,species_code,species_name,dbh,height,crown_ratio,status,"
          "expansion_factor,age,defect,plot_size_acres,slope_percent,aspect_degrees,elevation_ft\n")

STAND_CSV = HEADER + (
    "2,1,DF,Douglas Fir,14.0,90,0.4,Live,5.0,45,,0.25,10,180,1200\n"
    "2,2,WRC,Western Red Cedar,10.5,,,dead,5.0,,,0.25,10,180,1200\n"
    "1,1,DF,Douglas Fir,18.0,110,0.5,L,5.0,,0.1,0.25,,,\n"
)

MINIMAL_CSV = (
    "plot_id,tree_id,species_code,species_name,dbh,status,expansion_factor\n"
    "1,1,DF,Douglas Fir,12.0,Live,5.0\n"
    "1,2,DF,Douglas Fir,16.0,Live,5.0\n"
)


@pytest.fixture
def stand_csv(tmp_path):
    path = tmp_path / 'stand_a.csv'
    path.write_text(STAND_CSV)
    return path


class TestReadCsv:
    """Flat tree rows grouped into plots."""

    def test_groups_and_sorts_plots(self, stand_csv):
        inventory = read_csv(stand_csv)
        assert inventory.name == "stand_a"
        assert [p.plot_id for p in inventory.plots] == [1, 2]
        assert [len(p.trees) for p in inventory.plots] == [1, 2]

    def test_trees_keep_row_order(self, stand_csv):
        plot = read_csv(stand_csv).plots[1]
        assert [t.tree_id for t in plot.trees] == [1, 2]

    def test_tree_fields(self, stand_csv):
        plot = read_csv(stand_csv).plots[1]
        first, second = plot.trees
        assert first.species.code == "DF"
        assert first.species.common_name == "Douglas Fir"
        assert first.dbh == pytest.approx(14.0)
        assert first.height == pytest.approx(90.0)
        assert first.crown_ratio == pytest.approx(0.4)
        assert first.age == 45
        assert first.defect is None
        assert second.status is TreeStatus.DEAD
        assert second.height is None

    def test_plot_fields(self, stand_csv):
        first, second = read_csv(stand_csv).plots
        assert second.plot_size_acres == pytest.approx(0.25)
        assert second.slope_percent == pytest.approx(10.0)
        assert second.aspect_degrees == pytest.approx(180.0)
        assert second.elevation_ft == pytest.approx(1200.0)
        assert first.slope_percent is None

    def test_status_aliases(self, stand_csv):
        assert read_csv(stand_csv).plots[0].trees[0].status is TreeStatus.LIVE

    def test_minimal_columns_use_default_plot_size(self):
        inventory = read_csv_from_bytes(MINIMAL_CSV.encode(), "Minimal")
        assert inventory.name == "Minimal"
        assert inventory.plots[0].plot_size_acres == DEFAULT_PLOT_SIZE_ACRES
        assert inventory.plots[0].trees[0].height is None

    def test_species_code_kept_as_text(self):
        data = MINIMAL_CSV.replace("DF,Douglas Fir", "010,Balsam Fir").encode()
        inventory = read_csv_from_bytes(data, "Codes")
        assert inventory.species_list()[0].code == "010"

    def test_missing_required_column(self):
        data = "plot_id,tree_id,species_code,species_name,status,expansion_factor\n1,1,DF,Douglas Fir,Live,5\n"
        with pytest.raises(InvalidDataError, match="missing required columns"):
            read_csv_from_bytes(data.encode(), "Bad")

    def test_unknown_status(self):
        data = MINIMAL_CSV.replace("12.0,Live", "12.0,Sleeping").encode()
        with pytest.raises(InvalidDataError, match="unknown tree status"):
            read_csv_from_bytes(data, "Bad")

    def test_invalid_tree_rejected(self):
        data = MINIMAL_CSV.replace("12.0,Live", "-3.0,Live").encode()
        with pytest.raises(InvalidDataError, match="DBH must be positive"):
            read_csv_from_bytes(data, "Bad")

    def test_unparseable_number(self):
        data = MINIMAL_CSV.replace("12.0,Live", "twelve,Live").encode()
        with pytest.raises(InvalidDataError):
            read_csv_from_bytes(data, "Bad")

    def test_empty_file(self):
        with pytest.raises(InvalidDataError):
            read_csv_from_bytes(b"", "Empty")


class TestValidateCsvRows:
    def test_valid_data_has_no_issues(self):
        assert validate_csv_rows(MINIMAL_CSV.encode()) == []

    def test_collects_every_issue(self):
        data = (
            "plot_id,tree_id,species_code,species_name,dbh,crown_ratio,status,expansion_factor\n"
            "1,1,DF,Douglas Fir,-1.0,,Live,5.0\n"
            "1,2,DF,Douglas Fir,12.0,,zombie,5.0\n"
            "2,1,WRC,Western Red Cedar,12.0,1.5,Live,5.0\n"
        ).encode()
        issues = validate_csv_rows(data)
        assert [(i.row_index, i.field) for i in issues] == [
            (0, 'dbh'),
            (1, 'status'),
            (2, 'crown_ratio'),
        ]
        assert issues[2].plot_id == 2
        assert "defaulting to Live" in issues[1].message

    def test_unknown_status_with_bad_plot_id(self):
        data = MINIMAL_CSV.replace("1,1,DF,Douglas Fir,12.0,Live", "A,1,DF,Douglas Fir,12.0,zombie").encode()
        with pytest.raises(InvalidDataError, match="row 0"):
            validate_csv_rows(data)

    def test_missing_columns_raised(self):
        with pytest.raises(InvalidDataError, match="missing required columns"):
            validate_csv_rows(b"plot_id,tree_id\n1,1\n")


class TestCsvRoundTrip:
    def test_write_then_read(self, mixed_inventory, tmp_path):
        path = tmp_path / 'mixed.csv'
        write_csv(mixed_inventory, path)
        restored = read_csv(path)

        assert restored.num_plots() == mixed_inventory.num_plots()
        for original_plot, restored_plot in zip(mixed_inventory.plots, restored.plots):
            assert restored_plot.trees == original_plot.trees
            assert restored_plot.plot_size_acres == pytest.approx(original_plot.plot_size_acres)

    def test_dataframe_columns(self, mixed_inventory):
        frame = inventory_to_dataframe(mixed_inventory)
        assert len(frame) == 4
        assert list(frame['status']) == ["Live", "Live", "Live", "Dead"]


class TestJson:
    def test_round_trip(self, varied_inventory, tmp_path):
        path = tmp_path / 'varied.json'
        write_json(varied_inventory, path)
        restored = read_json(path)
        assert restored.to_dict() == varied_inventory.to_dict()

    def test_pretty_output(self, mixed_inventory, tmp_path):
        path = tmp_path / 'mixed.json'
        write_json(mixed_inventory, path, pretty=True)
        text = path.read_text()
        assert '\n  "name": "Mixed"' in text
        assert json.loads(text)['name'] == "Mixed"

    def test_from_bytes_renames(self, mixed_inventory):
        data = json.dumps(mixed_inventory.to_dict()).encode()
        inventory = read_json_from_bytes(data, "Renamed")
        assert inventory.name == "Renamed"
        assert inventory.num_trees() == 4

    def test_malformed_json(self):
        with pytest.raises(InvalidDataError, match="parsing error"):
            read_json_from_bytes(b"{not json", "Bad")

    def test_unexpected_structure(self):
        data = json.dumps({'name': "Bad", 'plots': [{'plot_id': 1}]}).encode()
        with pytest.raises(InvalidDataError, match="unexpected structure"):
            read_json_from_bytes(data, "Bad")

    def test_invalid_tree_rejected(self, mixed_inventory):
        data = mixed_inventory.to_dict()
        data['plots'][0]['trees'][0]['dbh'] = 0.0
        with pytest.raises(InvalidDataError):
            read_json_from_bytes(json.dumps(data).encode(), "Bad")


class TestLoadInventory:
    def test_dispatch_csv(self, stand_csv):
        assert load_inventory(stand_csv).num_trees() == 3

    def test_dispatch_json(self, mixed_inventory, tmp_path):
        path = tmp_path / 'mixed.JSON'
        write_json(mixed_inventory, path)
        assert load_inventory(path).name == "Mixed"

    def test_unsupported_extension(self, tmp_path):
        with pytest.raises(DataError, match="Unsupported file format"):
            load_inventory(tmp_path / 'stand.parquet')

    def test_dispatch_excel(self, mixed_inventory, tmp_path):
        path = tmp_path / 'mixed.xlsx'
        write_excel(mixed_inventory, path)
        inventory = load_inventory(path)
        assert inventory.name == "mixed"
        assert inventory.num_trees() == 4


class TestExcel:
    def test_write_then_read(self, mixed_inventory, tmp_path):
        path = tmp_path / 'cruise.xlsx'
        write_excel(mixed_inventory, path)
        restored = read_excel(path)

        assert restored.name == "cruise"
        assert restored.num_plots() == mixed_inventory.num_plots()
        for original_plot, restored_plot in zip(mixed_inventory.plots, restored.plots):
            assert restored_plot.trees == original_plot.trees
            assert restored_plot.plot_size_acres == pytest.approx(original_plot.plot_size_acres)

    def test_from_bytes_renames(self, mixed_inventory, tmp_path):
        path = tmp_path / 'mixed.xlsx'
        write_excel(mixed_inventory, path)
        inventory = read_excel_from_bytes(path.read_bytes(), "Renamed")
        assert inventory.name == "Renamed"
        assert inventory.species_list() == mixed_inventory.species_list()

    def test_not_a_workbook(self):
        with pytest.raises(InvalidDataError, match="Excel workbook"):
            read_excel_from_bytes(b"plot_id,tree_id\n1,1\n", "Bad")


class TestSaveInventory:
    @pytest.mark.parametrize("filename", ["out.csv", "out.json", "out.xlsx"])
    def test_dispatch_by_suffix(self, mixed_inventory, tmp_path, filename):
        path = tmp_path / filename
        save_inventory(mixed_inventory, path)
        assert load_inventory(path).num_trees() == mixed_inventory.num_trees()

    def test_pretty_json(self, mixed_inventory, tmp_path):
        path = tmp_path / 'out.json'
        save_inventory(mixed_inventory, path, pretty=True)
        assert '\n  "name"' in path.read_text()

    def test_unsupported_extension(self, mixed_inventory, tmp_path):
        with pytest.raises(DataError, match="Unsupported output format"):
            save_inventory(mixed_inventory, tmp_path / 'out.txt')
