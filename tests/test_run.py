import json

from space_saver import data, run


def test_sample_run_writes_plan_and_csv(tmp_path, monkeypatch):
    monkeypatch.setenv("SPACE_SAVER_OUTPUT_DIR", str(tmp_path / "out"))
    assert run.main([]) == 0

    plan = json.loads((tmp_path / "out" / "plan.json").read_text())
    assert len(plan["result"]["moves"]) == 3
    assert plan["data_audit"]["file_counts"]["locations"] == 9
    csv_text = (tmp_path / "out" / "moves.csv").read_text()
    assert csv_text == plan["csv_text"]


def test_run_with_request_file(tmp_path, monkeypatch):
    monkeypatch.setenv("SPACE_SAVER_OUTPUT_DIR", str(tmp_path))
    request = data.sample_request()
    request["options"]["headroom_fraction"] = 1.0
    path = tmp_path / "request.json"
    path.write_text(json.dumps(request))

    assert run.main([str(path)]) == 0
    assert (tmp_path / "plan.json").exists()


def test_run_rejects_invalid_request(tmp_path, monkeypatch):
    monkeypatch.setenv("SPACE_SAVER_OUTPUT_DIR", str(tmp_path / "out"))
    path = tmp_path / "bad.json"
    path.write_text("{not json")

    assert run.main([str(path)]) == 1
    assert not (tmp_path / "out").exists()


def test_output_dir_default(monkeypatch):
    monkeypatch.delenv("SPACE_SAVER_OUTPUT_DIR", raising=False)
    assert run.output_dir().name == "output"
