"""Unit tests for crud/components.py"""

from datetime import datetime

from sqlmodel import select

from componentize.crud.components import (
    delete_component, get_component, get_saved_components, save_component, search_components,
)
from componentize.crud.models import SavedComponent


# --- save_component ---

def test_save_assigns_id_and_timestamp(session):
    c = save_component(session, name="Footer", code="function Footer() {}")
    assert len(c.id) == 36
    assert isinstance(c.created_at, datetime)
    assert session.exec(select(SavedComponent)).one().name == "Footer"


def test_save_keeps_optional_fields(session):
    c = save_component(
        session, name="Pricing", code="function Pricing() {}",
        section_label="Pricing", original_html="<section>...</section>", style_variant="minimal",
    )
    stored = get_component(session, c.id)
    assert stored.original_html == "<section>...</section>"
    assert stored.style_variant == "minimal"


def test_saved_ids_are_unique(session):
    a = save_component(session, name="A", code="a")
    b = save_component(session, name="A", code="a")
    assert a.id != b.id


# --- get / delete ---

def test_get_component_missing(session):
    assert get_component(session, "nope") is None


def test_delete_component(session, component):
    assert delete_component(session, component.id) is True
    assert get_component(session, component.id) is None


def test_delete_component_missing(session):
    assert delete_component(session, "nope") is False


# --- listing ---

def test_saved_components_newest_first(session, component):
    save_component(session, name="Newer", code="x", created_at=datetime(2024, 6, 1))
    save_component(session, name="Oldest", code="x", created_at=datetime(2023, 1, 1))
    names = [c.name for c in get_saved_components(session)]
    assert names == ["Newer", "HeroBanner", "Oldest"]


def test_search_matches_name_label_and_code(session, component):
    save_component(session, name="PriceTable", code="function PriceTable() {}", section_label="Pricing",
                   created_at=datetime(2024, 2, 1))
    save_component(session, name="Plain", code="const useHero = 1;", created_at=datetime(2024, 3, 1))

    assert [c.name for c in search_components(session, "pricetable")] == ["PriceTable"]
    assert [c.name for c in search_components(session, "PRICING")] == ["PriceTable"]
    assert [c.name for c in search_components(session, "hero")] == ["Plain", "HeroBanner"]


def test_blank_search_returns_all(session, component):
    save_component(session, name="Other", code="x", created_at=datetime(2024, 2, 1))
    assert len(search_components(session, "  ")) == 2
