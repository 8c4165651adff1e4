import json

import main as cli


def _write_catalog(tmp_path, payload):
    path = tmp_path / "listings.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_cli_prints_matches_with_savings(tmp_path, capsys, raw_catalog):
    path = _write_catalog(tmp_path, raw_catalog)

    code = cli.main(["--name", "Blue Bottle Rum 700ml", "--price", "$100", "--catalog", str(path)])

    out = capsys.readouterr().out
    assert code == cli.EXIT_OK
    assert "Searching for: blue bottle rum 700ml | Current price: $100.00" in out
    assert "blue bottle rum 700ml  $80.00  https://www.baxus.co/asset/3  [cheaper: +20.00 (+20.00%)]" in out


def test_cli_reads_search_response_shape(tmp_path, capsys):
    payload = {"hits": {"hits": [{"_id": "9", "_source": {"name": "Blue Rum", "price": 5}}]}}
    path = _write_catalog(tmp_path, payload)

    code = cli.main(["--name", "Blue Rum", "--catalog", str(path), "--json"])

    result = json.loads(capsys.readouterr().out)
    assert code == cli.EXIT_OK
    assert result["status"] == "ok"
    assert result["matches"][0]["entry"]["id"] == "9"


def test_cli_reports_no_matches(tmp_path, capsys, raw_catalog):
    path = _write_catalog(tmp_path, raw_catalog)
    code = cli.main(["--name", "Peated Islay Scotch", "--catalog", str(path)])
    assert code == cli.EXIT_OK
    assert "No similar products found." in capsys.readouterr().out


def test_cli_rejects_zero_price(tmp_path, capsys):
    path = _write_catalog(tmp_path, [])
    code = cli.main(["--name", "Blue Rum", "--price", "0", "--catalog", str(path)])
    assert code == cli.EXIT_REJECTED
    assert "Error:" in capsys.readouterr().err


def test_cli_strict_rejects_malformed_listing(tmp_path):
    path = _write_catalog(tmp_path, [{"id": "1", "name": "Blue Rum"}])
    code = cli.main(["--name", "Blue Rum", "--catalog", str(path), "--strict"])
    assert code == cli.EXIT_REJECTED
