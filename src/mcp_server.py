"""
Portfolio Console MCP Server

Admin console for the portfolio site. Edits (experience, projects, skill
groups, hero image) are layered over the bundled Base Dataset, persisted
in the local store, and can be exported as a new `portfolio_data.py`.

When the page URL carries `?view=hr` the session is read-only: only the
viewing tools are registered and the console tools refuse to run.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, Optional

from fastmcp import FastMCP
from pydantic import ValidationError

import config
from base_dataset import load_base_dataset
from image_encoder import EncodeResult, encode_image
from portfolio_schema import (
    CATEGORY_MODELS,
    Experience,
    OverrideState,
    PortfolioData,
    Project,
    SkillGroup,
    dump_record,
)
from session import CLEAR_SESSION_PROMPT, PortfolioSession
from storage import FileStore

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

# Initialize MCP server
mcp = FastMCP(
    "portfolio-console",
    instructions="""
    Portfolio Console - edits the content of a personal portfolio site.

    Reading:
    - get_merged_view returns the dataset as the site renders it
      (your additions first, then the bundled entries)
    - get_share_link returns the read-only link for recruiters

    Editing (not available in the read-only HR view):
    1. add_experience / add_project / add_skill_group prepend new entries
    2. list_overrides shows your entries with their indexes
    3. delete_experience / delete_project / delete_skill_group remove one
       of YOUR entries by index (bundled entries cannot be deleted)
    4. set_hero_image / reset_hero_image change the profile picture

    Publishing:
    - export_portfolio_data writes portfolio_data.py; replace the bundled
      file with it to make the edits permanent
    - clear_session wipes all local edits (requires confirm=True)
    """,
)

# Session shared by all tools; built lazily from config
_session: Optional[PortfolioSession] = None

# Override category -> label used in messages
_CATEGORY_LABELS = {
    "experience": "experience",
    "projects": "project",
    "skills": "skill group",
}


def get_session() -> PortfolioSession:
    """Return the active session, creating it from configuration if needed."""
    global _session
    if _session is None:
        base = load_base_dataset(config.BASE_DATASET_PATH)
        store = FileStore(config.STORAGE_PATH, quota_bytes=config.STORAGE_QUOTA)
        _session = PortfolioSession(base, store, config.PAGE_URL)
        logger.info(f"Session started for {config.PAGE_URL} (store: {config.STORAGE_PATH})")
    return _session


def set_session(session: Optional[PortfolioSession]) -> None:
    """Install `session` as the active session (None forces a rebuild)."""
    global _session
    _session = session


def _console_session() -> tuple[Optional[PortfolioSession], Optional[dict[str, Any]]]:
    session = get_session()
    if session.is_restricted():
        return None, {
            "status": "error",
            "message": "The console is disabled in the read-only HR view."
        }
    return session, None


def _clean_items(items: Optional[list[str]]) -> list[str]:
    """Strip tag/bullet entries and drop blank ones."""
    return [item.strip() for item in items or [] if item and item.strip()]


def _saved_message(session: PortfolioSession, message: str) -> dict[str, Any]:
    persisted = session.overrides.in_sync
    if not persisted:
        message += " Storage is full or unavailable: the change lasts for this session only."
    return {"status": "success", "message": message, "persisted": persisted}


async def _resolve_image(image_path: Optional[str], image: Optional[str]) -> EncodeResult | None:
    """Encode `image_path` if given, otherwise wrap an inline `image` value."""
    if image_path:
        done: asyncio.Future = asyncio.get_running_loop().create_future()
        encode_image(image_path, done.set_result)
        return await done
    if image:
        return EncodeResult(source="inline", data_uri=image)
    return None


def _summary(category: str, record: Any) -> str:
    if category == "experience":
        return f"{record.role} @ {record.company}"
    if category == "projects":
        return f"{record.title} ({record.year})"
    return record.category


# =============================================================================
# Read-only tools
# =============================================================================

def get_merged_view() -> dict[str, Any]:
    """
    Get the portfolio exactly as the site renders it.

    Returns:
        The merged dataset: local additions first, then bundled entries,
        and the hero image currently in effect
    """
    session = get_session()
    view = session.get_merged_view()
    return {
        "status": "success",
        "restricted": session.is_restricted(),
        "view": view.model_dump(mode="json", exclude_none=True),
    }


def get_share_link() -> dict[str, Any]:
    """
    Get the read-only link to send to recruiters.

    The link opens the site in HR view, where no editing controls exist.
    """
    link = get_session().get_share_link()
    return {
        "status": "success",
        "message": "Copy this link to share the read-only portfolio.",
        "share_link": link,
    }


def get_visibility() -> dict[str, Any]:
    """Report whether this session is the read-only HR view."""
    session = get_session()
    return {
        "status": "success",
        "restricted": session.is_restricted(),
        "page_url": session.gate.page_url,
    }


def get_portfolio_schema() -> dict[str, Any]:
    """
    Get the JSON schema of the records the console accepts.

    Returns:
        Schemas for experience, project and skill group entries
    """
    return {
        "version": "1.0",
        "records": {
            "experience": Experience.model_json_schema(),
            "project": Project.model_json_schema(),
            "skill_group": SkillGroup.model_json_schema(),
        },
        "dataset": PortfolioData.model_json_schema(),
        "overrides": OverrideState.model_json_schema(),
    }


# =============================================================================
# Console tools
# =============================================================================

def list_overrides() -> dict[str, Any]:
    """
    List the entries added in this browser profile.

    Indexes shown here are the ones the delete tools expect.
    """
    session, error = _console_session()
    if error:
        return error

    overrides: dict[str, list[dict[str, Any]]] = {}
    for category in CATEGORY_MODELS:
        overrides[category] = [
            {"index": i, "id": entry_id, "label": _summary(category, record), "record": dump_record(record)}
            for i, (entry_id, record) in enumerate(session.overrides.entries(category))
        ]
    state = session.overrides.state
    return {
        "status": "success",
        "hero_image_overridden": state.heroImage is not None,
        "counts": {c: len(v) for c, v in overrides.items()},
        "overrides": overrides,
    }


async def add_experience(
    role: str,
    company: str,
    period: str = "",
    location: str = "",
    type: str = "Professional",
    achievements: Optional[list[str]] = None,
    image_path: Optional[str] = None,
    image: Optional[str] = None,
) -> dict[str, Any]:
    """
    Register a new experience entry at the top of the list.

    Args:
        role: Job role
        company: Company name
        period: e.g. "2023 - Present"
        location: City / country
        type: Professional, Internship, Freelance, ...
        achievements: Key achievements, one per item
        image_path: Optional company logo file to embed
        image: Optional logo given directly as a data URI

    Returns:
        Confirmation with the new entry's id
    """
    session, error = _console_session()
    if error:
        return error
    if not role.strip() or not company.strip():
        return {"status": "error", "message": "Missing required field: role and company"}

    encoded = await _resolve_image(image_path, image)
    if encoded is not None and not encoded.ok:
        return {"status": "error", "message": f"Could not read image: {encoded.error}"}

    try:
        record = Experience(
            role=role.strip(),
            company=company.strip(),
            period=period.strip(),
            location=location.strip(),
            type=type.strip() or "Professional",
            achievements=_clean_items(achievements),
            image=encoded.data_uri if encoded else None,
        )
    except ValidationError as e:
        return {"status": "error", "message": f"Invalid experience: {e}"}

    entry_id = session.add_experience(record)
    result = _saved_message(session, f"Experience registered: {record.role} @ {record.company}")
    result["id"] = entry_id
    return result


async def add_project(
    title: str,
    description: str = "",
    year: str = "2025",
    stack: Optional[list[str]] = None,
    impact: Optional[str] = None,
    image_path: Optional[str] = None,
    image: Optional[str] = None,
) -> dict[str, Any]:
    """
    Deploy a new project entry at the top of the list.

    Args:
        title: Project title
        description: Summary and impact
        year: e.g. "2025"
        stack: Technology tags
        impact: Optional one-line outcome
        image_path: Optional visual to embed
        image: Optional visual given directly as a data URI
    """
    session, error = _console_session()
    if error:
        return error
    if not title.strip():
        return {"status": "error", "message": "Missing required field: title"}

    encoded = await _resolve_image(image_path, image)
    if encoded is not None and not encoded.ok:
        return {"status": "error", "message": f"Could not read image: {encoded.error}"}

    try:
        record = Project(
            title=title.strip(),
            description=description.strip(),
            year=year.strip(),
            stack=_clean_items(stack),
            impact=impact.strip() if impact and impact.strip() else None,
            image=encoded.data_uri if encoded else None,
        )
    except ValidationError as e:
        return {"status": "error", "message": f"Invalid project: {e}"}

    entry_id = session.add_project(record)
    result = _saved_message(session, f"Project deployed: {record.title}")
    result["id"] = entry_id
    return result


async def add_skill_group(
    category: str,
    items: Optional[list[str]] = None,
    image_path: Optional[str] = None,
    image: Optional[str] = None,
) -> dict[str, Any]:
    """
    Commit a new skill group at the top of the skills matrix.

    Args:
        category: Category name
        items: Skills in the group
        image_path: Optional icon file to embed
        image: Optional icon given directly as a data URI
    """
    session, error = _console_session()
    if error:
        return error
    if not category.strip():
        return {"status": "error", "message": "Missing required field: category"}

    encoded = await _resolve_image(image_path, image)
    if encoded is not None and not encoded.ok:
        return {"status": "error", "message": f"Could not read image: {encoded.error}"}

    try:
        record = SkillGroup(
            category=category.strip(),
            items=_clean_items(items),
            image=encoded.data_uri if encoded else None,
        )
    except ValidationError as e:
        return {"status": "error", "message": f"Invalid skill group: {e}"}

    entry_id = session.add_skill_group(record)
    result = _saved_message(session, f"Skill group committed: {record.category}")
    result["id"] = entry_id
    return result


def _delete(category: str, index: int, delete: Callable[[PortfolioSession, int], bool]) -> dict[str, Any]:
    session, error = _console_session()
    if error:
        return error
    label = _CATEGORY_LABELS[category]
    if not delete(session, index):
        return {
            "status": "success",
            "message": f"No local {label} at index {index}; nothing deleted.",
            "deleted": False,
        }
    result = _saved_message(session, f"Local {label} at index {index} deleted.")
    result["deleted"] = True
    result["remaining_count"] = len(session.overrides.entries(category))
    return result


def delete_experience(index: int) -> dict[str, Any]:
    """
    Delete one of your experience entries.

    Args:
        index: Position in list_overrides()["overrides"]["experience"]
    """
    return _delete("experience", index, PortfolioSession.delete_experience)


def delete_project(index: int) -> dict[str, Any]:
    """
    Delete one of your project entries.

    Args:
        index: Position in list_overrides()["overrides"]["projects"]
    """
    return _delete("projects", index, PortfolioSession.delete_project)


def delete_skill_group(index: int) -> dict[str, Any]:
    """
    Delete one of your skill groups.

    Args:
        index: Position in list_overrides()["overrides"]["skills"]
    """
    return _delete("skills", index, PortfolioSession.delete_skill_group)


async def set_hero_image(file_path: str) -> dict[str, Any]:
    """
    Replace the profile picture with an image file.

    Args:
        file_path: Absolute path to the image
    """
    session, error = _console_session()
    if error:
        return error

    encoded = await _resolve_image(file_path, None)
    if encoded is None or not encoded.ok:
        reason = encoded.error if encoded else "no file given"
        return {"status": "error", "message": f"Could not read image: {reason}"}

    session.set_hero_image(encoded.data_uri)
    return _saved_message(session, f"Hero image replaced with {Path(file_path).name}.")


def reset_hero_image() -> dict[str, Any]:
    """Restore the bundled profile picture."""
    session, error = _console_session()
    if error:
        return error
    session.reset_hero_image()
    result = _saved_message(session, "Hero image reset to the bundled picture.")
    result["hero_image"] = session.get_merged_view().heroImage
    return result


def clear_session(confirm: bool = False) -> dict[str, Any]:
    """
    Wipe every local edit (entries and hero image) from this profile.

    This cannot be undone. Export first if you want to keep the edits.

    Args:
        confirm: Must be True to actually clear
    """
    session, error = _console_session()
    if error:
        return error
    if not session.clear_session(lambda prompt: confirm):
        return {
            "status": "confirmation_required",
            "message": CLEAR_SESSION_PROMPT + " Call again with confirm=True.",
        }
    return _saved_message(session, "Local session cleared.")


def export_portfolio_data(output_dir: Optional[str] = None) -> dict[str, Any]:
    """
    Generate portfolio_data.py from the merged dataset.

    Replace src/portfolio_data.py with the written file to make the edits
    permanent.

    Args:
        output_dir: Directory to write into (defaults to PORTFOLIO_EXPORT_DIR)
    """
    session, error = _console_session()
    if error:
        return error

    artifact = session.export()
    target = Path(output_dir).expanduser() if output_dir else config.EXPORT_DIR
    try:
        path = artifact.write(target)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to write export to {target}: {e}")
        return {"status": "error", "message": f"Failed to write export: {e}"}

    view = session.get_merged_view()
    return {
        "status": "success",
        "message": f"Generated {artifact.filename}",
        "file_path": str(path),
        "counts": {
            "experience": len(view.experience),
            "projects": len(view.projects),
            "skills": len(view.skills),
        },
    }


READ_ONLY_TOOLS = (
    get_merged_view,
    get_share_link,
    get_visibility,
    get_portfolio_schema,
)

CONSOLE_TOOLS = (
    list_overrides,
    add_experience,
    add_project,
    add_skill_group,
    delete_experience,
    delete_project,
    delete_skill_group,
    set_hero_image,
    reset_hero_image,
    clear_session,
    export_portfolio_data,
)


def available_tools(session: PortfolioSession) -> list[Callable[..., Any]]:
    """Tools exposed for `session`; the HR view gets the read-only set only."""
    if session.is_restricted():
        return list(READ_ONLY_TOOLS)
    return [*READ_ONLY_TOOLS, *CONSOLE_TOOLS]


def register_tools(server: FastMCP, session: PortfolioSession) -> list[str]:
    """Register the tools available to `session` on `server`."""
    names = []
    for fn in available_tools(session):
        server.tool(fn)
        names.append(fn.__name__)
    logger.info(f"Registered {len(names)} tools (restricted={session.is_restricted()})")
    return names


def main():
    """Entry point for the portfolio-console CLI command."""
    register_tools(mcp, get_session())
    mcp.run()


if __name__ == "__main__":
    main()
