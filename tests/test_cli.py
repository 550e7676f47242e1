import pytest
import yaml

from catalog_translate import cli, translators
from catalog_translate.catalog import write_catalog


class FakeResponse:
    def __init__(self, payload):
        self._payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self._payload


@pytest.fixture
def source(tmp_path, monkeypatch):
    for name in (
        "CATALOG_TRANSLATE_PROVIDER",
        "LIBRETRANSLATE_URL",
        "LIBRETRANSLATE_API_KEY",
        "GOOGLE_TRANSLATE_API_KEY",
        "CATALOG_TRANSLATE_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "en.yml"
    write_catalog(path, {"en": {"hello": "Hello %{name}"}})
    return path


def test_dry_run_writes_nothing(source, capsys):
    assert cli.main([str(source), "fr", "de", "--dry-run"]) == 0
    assert sorted(p.name for p in source.parent.iterdir()) == ["en.yml"]
    out = capsys.readouterr().out
    assert "[dry-run] 1 string(s) would go to" in out
    assert "2 language(s) translated" in out


def test_translates_through_libretranslate(source, monkeypatch, capsys):
    seen = []

    def fake_post(url, timeout=None, json=None, **kwargs):
        seen.append((url, json))
        return FakeResponse({"translatedText": json["q"].replace("Hello", "Bonjour")})

    monkeypatch.setattr(translators.requests, "post", fake_post)

    assert cli.main([str(source), "fr", "--api-url", "http://lt:5000", "--overwrite"]) == 0

    assert seen[0][0] == "http://lt:5000/translate"
    with open(source.parent / "fr.yml", encoding="utf-8") as f:
        assert yaml.safe_load(f) == {"fr": {"hello": "Bonjour %{name}"}}


def test_failing_language_is_reported_and_others_continue(source, monkeypatch, capsys):
    def fake_post(url, timeout=None, json=None, **kwargs):
        if json["target"] == "xx":
            return FakeResponse({"error": "unsupported"})
        return FakeResponse({"translatedText": json["q"]})

    monkeypatch.setattr(translators.requests, "post", fake_post)

    assert cli.main([str(source), "xx", "fr"]) == 1

    err = capsys.readouterr().err
    assert "[ERROR] xx" in err
    assert not (source.parent / "xx.yml").exists()
    assert (source.parent / "fr.yml").exists()


def test_missing_catalog(tmp_path, capsys):
    assert cli.main([str(tmp_path / "en.yml"), "fr", "--dry-run"]) == 1
    assert "[ERROR]" in capsys.readouterr().err


def test_google_without_key_is_an_error(source, capsys):
    assert cli.main([str(source), "fr", "--provider", "google"]) == 1
    assert "API key" in capsys.readouterr().err


def test_corrupt_target_file_is_reported_and_others_continue(source, capsys):
    (source.parent / "fr.yml").write_text("fr: [unclosed\n", encoding="utf-8")

    assert cli.main([str(source), "fr", "de", "--dry-run"]) == 1

    captured = capsys.readouterr()
    assert "[ERROR] fr" in captured.err
    assert "[dry-run] 1 string(s) would go to" in captured.out
    assert "1 language(s) translated" in captured.out


def test_provider_flag_picks_up_google_key_from_environment(source, monkeypatch):
    monkeypatch.setenv("GOOGLE_TRANSLATE_API_KEY", "g-key")
    monkeypatch.setenv("LIBRETRANSLATE_URL", "http://libre:5000")
    seen = []

    def fake_post(url, timeout=None, params=None, data=None, **kwargs):
        seen.append((url, params))
        return FakeResponse({"data": {"translations": [{"translatedText": data["q"]}]}})

    monkeypatch.setattr(translators.requests, "post", fake_post)

    assert cli.main([str(source), "fr", "--provider", "google"]) == 0
    assert seen == [(translators.GOOGLE_API_URL, {"key": "g-key"})]
