import json

import pytest

import verify_content


def test_clean_content_passes(content_dir):
    # drop the deliberately empty entry
    path = content_dir / "dialogue" / "Base.json"
    document = json.loads(path.read_text(encoding="utf-8"))
    document["entries"] = [e for e in document["entries"] if e["id"] != "base.empty"]
    path.write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")

    assert verify_content.verify(content_dir) == []


def test_problems_reported(content_dir):
    with open(content_dir / "quizzes.json", "w", encoding="utf-8") as f:
        json.dump({"quizzes": [{
            "id": "base.letterman.quiz",
            "kind": "multiple_choice",
            "answers": ["a", "b"],
            "branches": {"0": "base.letterman.q_wrong1", "1": "base.nowhere"},
        }]}, f)

    problems = verify_content.verify(content_dir)

    assert "dialogue 'base.empty' has no lines" in problems
    assert any("base.nowhere" in p for p in problems)
    assert any("villaoutside.teta.fill_in_blank" in p for p in problems)


def test_main_exits_non_zero(content_dir, monkeypatch):
    monkeypatch.setattr("sys.argv", ["verify_content.py", str(content_dir)])
    with pytest.raises(SystemExit) as excinfo:
        verify_content.main()
    assert excinfo.value.code == 1
