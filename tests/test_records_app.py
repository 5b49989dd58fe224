import json
from pathlib import Path

import pytest

from records_app import RecordsApp, dump_records, next_record_id, parse_records


class FakePage:
    def __init__(self):
        self.updates = 0

    def update(self):
        self.updates += 1


def test_parse_records_empty_marker():
    assert parse_records("[]") == []


def test_parse_records_fills_missing_ids():
    records = parse_records('[{"id": 3, "text": "a"}, {"text": "b"}, {"id": true, "text": "c"}]')
    assert [r["id"] for r in records] == [3, 4, 5]
    assert records[1]["text"] == "b"


@pytest.mark.parametrize("text", ['{"id": 1}', '"hello"', "[1, 2]"])
def test_parse_records_rejects_non_record_lists(text):
    with pytest.raises(ValueError):
        parse_records(text)


def test_parse_records_rejects_invalid_json():
    with pytest.raises(ValueError):
        parse_records("{not valid json")


def test_dump_records_keeps_unicode():
    text = dump_records([{"id": 1, "text": "买菜", "done": False}])
    assert "买菜" in text
    assert json.loads(text) == [{"id": 1, "text": "买菜", "done": False}]


def test_next_record_id():
    assert next_record_id([]) == 1
    assert next_record_id([{"id": 2}, {"id": 7}]) == 8


def test_app_loads_existing_file(tmp_path: Path):
    path = tmp_path / "records.json"
    path.write_text('[{"id": 1, "text": "a", "done": true}, {"id": 2, "text": "b", "done": false}]', encoding="utf-8")

    app = RecordsApp(FakePage(), str(path))

    assert [r["text"] for r in app.records_data] == ["a", "b"]
    assert app.items_left.value == "1 条记录未完成"


def test_app_starts_empty_when_file_missing(tmp_path: Path):
    app = RecordsApp(FakePage(), str(tmp_path / "records.json"))

    assert app.records_data == []
    assert not (tmp_path / "records.json").exists()


def test_app_reports_load_error(tmp_path: Path):
    path = tmp_path / "records.json"
    path.write_text("{not valid json", encoding="utf-8")

    app = RecordsApp(FakePage(), str(path))

    assert app.records_data == []
    assert app.status_text.value.startswith("记录文件格式错误")


def test_app_saves_after_delete_and_clear(tmp_path: Path):
    path = tmp_path / "records.json"
    path.write_text(
        '[{"id": 1, "text": "a", "done": true}, {"id": 2, "text": "b", "done": false}, {"id": 3, "text": "c", "done": false}]',
        encoding="utf-8",
    )
    app = RecordsApp(FakePage(), str(path))

    item = app.records.controls[2]
    app.record_delete(item)
    assert [r["id"] for r in json.loads(path.read_text(encoding="utf-8"))] == [1, 2]

    app.clear_clicked(None)
    assert json.loads(path.read_text(encoding="utf-8")) == [{"id": 2, "text": "b", "done": False}]


def test_app_saves_changed_record(tmp_path: Path):
    path = tmp_path / "records.json"
    path.write_text('[{"id": 1, "text": "a", "done": false, "tag": "x"}]', encoding="utf-8")
    app = RecordsApp(FakePage(), str(path))

    item = app.records.controls[0]
    item.set_done(True)
    app.record_changed(item)

    assert json.loads(path.read_text(encoding="utf-8")) == [{"id": 1, "text": "a", "done": True, "tag": "x"}]
    assert app.items_left.value == "0 条记录未完成"


def test_app_reports_save_error(tmp_path: Path):
    path = tmp_path / "records.json"
    path.write_text('[{"id": 1, "text": "a", "done": false}]', encoding="utf-8")
    app = RecordsApp(FakePage(), str(path))

    app.path_field.value = str(tmp_path / "missing" / "records.json")

    assert app.save_records() is False
    assert app.status_text.value.startswith("保存失败")


def test_parse_records_reassigns_duplicate_ids():
    records = parse_records('[{"id": 1, "text": "a"}, {"id": 1, "text": "b"}, {"id": 2, "text": "c"}]')
    assert [r["id"] for r in records] == [1, 3, 2]


def test_app_delete_keeps_record_with_same_id(tmp_path: Path):
    path = tmp_path / "records.json"
    path.write_text('[{"id": 1, "text": "a"}, {"id": 1, "text": "b"}]', encoding="utf-8")
    app = RecordsApp(FakePage(), str(path))

    app.record_delete(app.records.controls[0])

    assert [r["text"] for r in json.loads(path.read_text(encoding="utf-8"))] == ["b"]


def test_app_does_not_overwrite_file_it_could_not_load(tmp_path: Path):
    path = tmp_path / "records.json"
    path.write_text('{"not": "a list"}', encoding="utf-8")
    app = RecordsApp(FakePage(), str(path))

    app.records_data.append({"id": 1, "text": "new", "done": False})

    assert app.save_records() is False
    assert path.read_text(encoding="utf-8") == '{"not": "a list"}'
    assert app.status_text.value.startswith("记录文件未成功加载")


def test_app_saves_again_after_successful_reload(tmp_path: Path):
    path = tmp_path / "records.json"
    path.write_text("{broken", encoding="utf-8")
    app = RecordsApp(FakePage(), str(path))

    app.path_field.value = str(tmp_path / "other.json")
    app.load_clicked(None)
    app.records_data.append({"id": 1, "text": "new", "done": False})

    assert app.save_records() is True
    assert json.loads((tmp_path / "other.json").read_text(encoding="utf-8"))[0]["text"] == "new"
    assert path.read_text(encoding="utf-8") == "{broken"
