import json

import pytest

from reve_admin import run_once

from conftest import FakeClient


@pytest.fixture
def fake_client(monkeypatch, tmp_path, sample_product):
    client = FakeClient({
        ("GET", "/products/12/"): sample_product,
        ("POST", "/products/"): {"id": 77},
        ("POST", "/orders/3/mark_paid/"): {},
    })
    monkeypatch.setattr(run_once, "SESSION_FILE", tmp_path / "session.json")
    monkeypatch.setattr(run_once, "ApiClient", lambda session: client)
    return client


def test_show_prints_adjusted_dimensions(fake_client, capsys):
    assert run_once.main(["show", "12"]) == 0
    out = capsys.readouterr().out
    assert "Cambridge Divan Bed" in out
    assert '94 cm (37.0")' in out


def test_save_new_product(fake_client, tmp_path):
    draft_file = tmp_path / "draft.json"
    draft_file.write_text(json.dumps({
        "name": "Ottoman Bed",
        "description": "Lift-up storage",
        "category": 1,
        "price": 650,
        "images": ["https://cdn/ottoman.jpg"],
    }), encoding="utf-8")

    assert run_once.main(["save", str(draft_file)]) == 0
    assert fake_client.calls[-1][:2] == ("POST", "/products/")


def test_save_invalid_draft_fails(fake_client, tmp_path):
    draft_file = tmp_path / "draft.json"
    draft_file.write_text(json.dumps({"name": "No images", "description": "x", "category": 1}), encoding="utf-8")
    assert run_once.main(["save", str(draft_file)]) == 1
    assert fake_client.calls == []


def test_save_missing_file(fake_client, tmp_path):
    assert run_once.main(["save", str(tmp_path / "nope.json")]) == 1


def test_order_command(fake_client):
    assert run_once.main(["order", "3", "mark_paid"]) == 0


def test_order_command_rejects_unknown_action(fake_client):
    with pytest.raises(SystemExit):
        run_once.main(["order", "3", "refund"])


def test_show_scopes_filter_options(monkeypatch, tmp_path, sample_product, capsys):
    client = FakeClient({
        ("GET", "/products/12/"): sample_product,
        ("GET", "/categories/"): [{"id": 3, "name": "Beds"}],
        ("GET", "/subcategories/"): [],
        ("GET", "/filter-types/"): [{"id": 1, "name": "Bed Size", "options": [{"id": 4, "name": "King"}]}],
        ("GET", "/category-filters/"): [{"id": 1, "category": 3, "filter_type": 1}],
        ("GET", "/style-library/"): [],
    })
    monkeypatch.setattr(run_once, "SESSION_FILE", tmp_path / "session.json")
    monkeypatch.setattr(run_once, "ApiClient", lambda session: client)

    assert run_once.main(["show", "12"]) == 0
    out = capsys.readouterr().out
    assert "分类筛选: Bed Size" in out
    assert "筛选项: [4]" in out
    assert "Dropped 1 filter option(s) outside this category" in out


def test_show_non_dict_product_fails(fake_client):
    fake_client.responses[("GET", "/products/12/")] = ["unexpected"]
    assert run_once.main(["show", "12"]) == 1


def test_products_by_category(fake_client, capsys):
    fake_client.responses[("GET", "/products/")] = [
        {"id": 10, "name": "Divan", "category": 1, "price": 300},
        {"id": 11, "name": "Hybrid", "category": 2, "price": 500},
    ]
    fake_client.responses[("GET", "/categories/")] = [{"id": 1, "name": "Beds"}]

    assert run_once.main(["products", "--category", "1"]) == 0
    out = capsys.readouterr().out
    assert "Divan" in out
    assert "Hybrid" not in out


def test_delete_command(fake_client):
    fake_client.responses[("DELETE", "/products/10/")] = None
    assert run_once.main(["delete", "10"]) == 0
    assert run_once.main(["delete", "11"]) == 1


def test_upload_command_reports_partial_failure(fake_client, tmp_path, capsys):
    good, bad = tmp_path / "a.jpg", tmp_path / "b.jpg"
    good.write_bytes(b"img")
    bad.write_bytes(b"img")
    fake_client.responses[("UPLOAD", "a.jpg")] = "https://cdn/a.jpg"

    assert run_once.main(["upload", str(good), str(bad)]) == 1
    out = capsys.readouterr().out
    assert "a.jpg: https://cdn/a.jpg" in out
    assert "b.jpg: 上传失败" in out


def test_icon_command_inlines_svg(fake_client, tmp_path, capsys):
    icon = tmp_path / "icon.svg"
    icon.write_text('<svg viewBox="0 0 4 4">\n  <rect width="4" height="4"/>\n</svg>', encoding="utf-8")
    assert run_once.main(["icon", str(icon)]) == 0
    assert '<svg viewBox="0 0 4 4"><rect width="4" height="4"/></svg>' in capsys.readouterr().out
    assert fake_client.calls == []


def test_icon_command_upload_failure(fake_client, tmp_path):
    icon = tmp_path / "icon.png"
    icon.write_bytes(b"png")
    assert run_once.main(["icon", str(icon)]) == 1


def test_assign_and_toggle_filter(fake_client):
    fake_client.responses[("POST", "/category-filters/")] = {"id": 5}
    fake_client.responses[("GET", "/category-filters/")] = [{"id": 5, "category": 1, "filter_type": 2, "is_active": True}]
    fake_client.responses[("PATCH", "/category-filters/5/")] = {}

    assert run_once.main(["assign-filter", "2", "--category", "1"]) == 0
    assert run_once.main(["toggle-filter", "5"]) == 0
    assert fake_client.calls[-1] == ("PATCH", "/category-filters/5/", {"is_active": False})
    assert run_once.main(["toggle-filter", "6"]) == 1


def test_slides_and_toggle_slide(fake_client, capsys):
    fake_client.responses[("GET", "/hero-slides/")] = [{"id": 2, "title": "Spring", "is_active": False}]
    fake_client.responses[("PATCH", "/hero-slides/2/")] = {}

    assert run_once.main(["slides"]) == 0
    assert "Spring" in capsys.readouterr().out
    assert run_once.main(["toggle-slide", "2"]) == 0
    assert fake_client.calls[-1] == ("PATCH", "/hero-slides/2/", {"is_active": True})
    assert run_once.main(["toggle-slide", "9"]) == 1


def test_review_command(fake_client):
    fake_client.responses[("POST", "/reviews/4/set_visibility/")] = {}
    fake_client.responses[("DELETE", "/reviews/4/")] = None

    assert run_once.main(["review", "4", "hide"]) == 0
    assert fake_client.calls[-1][2] == {"is_visible": False}
    assert run_once.main(["review", "4", "delete"]) == 0
