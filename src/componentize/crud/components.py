"""Saved component persistence: save, delete, list newest-first, and search"""

from datetime import datetime

from sqlmodel import Session, select

from componentize.crud.models import SavedComponent


def save_component(
    session: Session,
    name: str,
    code: str,
    section_label: str | None = None,
    original_html: str | None = None,
    style_variant: str | None = None,
    created_at: datetime | None = None,
    ) -> SavedComponent:
    """Insert a new component with a fresh id. Flushes but does not commit."""
    component = SavedComponent(
        name=name,
        code=code,
        section_label=section_label,
        original_html=original_html,
        style_variant=style_variant,
    )
    if created_at is not None:
        component.created_at = created_at
    session.add(component)
    session.flush()
    return component


def get_component(session: Session, component_id: str) -> SavedComponent | None:
    return session.get(SavedComponent, component_id)


def delete_component(session: Session, component_id: str) -> bool:
    """Delete by id. Returns False if no such component exists."""
    component = session.get(SavedComponent, component_id)
    if component is None:
        return False
    session.delete(component)
    session.flush()
    return True


def get_saved_components(session: Session) -> list[SavedComponent]:
    """All saved components, newest first."""
    return list(session.exec(select(SavedComponent).order_by(SavedComponent.created_at.desc())).all())


def search_components(session: Session, query: str) -> list[SavedComponent]:
    """Case-insensitive substring match over name, section label, and code; blank query returns all."""
    components = get_saved_components(session)
    if not query.strip():
        return components
    q = query.lower()
    return [
        c for c in components
        if q in c.name.lower()
        or (c.section_label and q in c.section_label.lower())
        or q in c.code.lower()
    ]
