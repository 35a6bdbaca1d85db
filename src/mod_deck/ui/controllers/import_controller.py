"""Controller for importing a mod from an archive."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path

from mod_deck.bridge.api import ModBackend
from mod_deck.bridge.errors import BackendError
from mod_deck.engine.previews import PreviewHandle, PreviewSlot
from mod_deck.models.archive import ArchiveAnalysis, ImportRequest, is_archive_path
from mod_deck.models.catalog import Category, Entity


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ImportDraft:
    """Editable form values for one import."""

    mod_name: str = ""
    author: str = ""
    description: str = ""
    category_tag: str = ""
    category_slug: str | None = None
    entity_slug: str | None = None
    internal_root: str = ""
    preview_path: str | None = None


@dataclass(slots=True)
class ImportController:
    backend: ModBackend
    categories: list[Category] = field(default_factory=list)
    entities: list[Entity] = field(default_factory=list)
    analysis: ArchiveAnalysis | None = None
    draft: ImportDraft = field(default_factory=ImportDraft)
    preview: PreviewSlot = field(default_factory=PreviewSlot)
    importing: bool = False

    def choose_archive(self) -> tuple[bool, str | None]:
        """Ask the backend for a file dialog, then analyze the pick."""
        try:
            path = self.backend.select_archive_file()
        except BackendError as exc:
            return False, f"Could not open file dialog: {exc}"
        if path is None:
            return False, None
        return self.open_archive(path)

    def open_archive(self, path: str | Path) -> tuple[bool, str | None]:
        path = str(path)
        if not is_archive_path(path):
            return False, "Only .zip, .rar and .7z archives can be imported."
        self.close()
        try:
            self.analysis = self.backend.analyze_archive(path)
        except BackendError as exc:
            self.analysis = None
            return False, f"Failed to analyze archive: {exc}"
        if not self.categories:
            try:
                self.categories = self.backend.get_categories()
            except BackendError as exc:
                logger.warning("Failed to fetch categories for import: %s", exc)
        self._apply_defaults()
        return True, None

    def _apply_defaults(self) -> None:
        analysis = self.analysis
        assert analysis is not None
        self.draft = ImportDraft(
            mod_name=analysis.default_mod_name(),
            author=analysis.deduced_author or "",
            internal_root=analysis.default_internal_root(),
        )
        deduced = analysis.deduced_category_slug
        if deduced and any(c.slug == deduced for c in self.categories):
            self.select_category(deduced)
        else:
            self.entities = []
        self._load_detected_preview()

    def select_category(self, category_slug: str | None) -> None:
        """Switch category; the entity choice is re-deduced for the new list."""
        self.draft.category_slug = category_slug
        self.draft.entity_slug = None
        self.entities = []
        if not category_slug:
            return
        try:
            self.entities = self.backend.get_entities_by_category(category_slug)
        except BackendError as exc:
            logger.warning("Failed to fetch entities for %s: %s", category_slug, exc)
            return
        self.draft.entity_slug = self._deduce_entity(category_slug)

    def _deduce_entity(self, category_slug: str) -> str | None:
        analysis = self.analysis
        if analysis is None:
            return None
        slugs = {e.slug for e in self.entities}
        if category_slug == analysis.deduced_category_slug and analysis.deduced_entity_slug:
            if analysis.deduced_entity_slug in slugs:
                return analysis.deduced_entity_slug
            logger.debug("Deduced entity %s not in %s", analysis.deduced_entity_slug, category_slug)
            return None
        if analysis.raw_ini_target:
            target = analysis.raw_ini_target.casefold()
            for entity in self.entities:
                if entity.name.casefold() == target or entity.slug.casefold() == target:
                    return entity.slug
        return None

    def _load_detected_preview(self) -> None:
        analysis = self.analysis
        if analysis is None or not analysis.detected_preview_internal_path:
            return
        internal = analysis.detected_preview_internal_path
        try:
            data = self.backend.read_archive_file_content(analysis.file_path, internal)
        except BackendError as exc:
            logger.warning("Failed to load detected preview %s: %s", internal, exc)
            return
        self.preview.load(data, internal)

    def choose_preview_image(self) -> tuple[bool, str | None]:
        """Pick a separate image on disk to use as the mod preview."""
        try:
            path = self.backend.select_file()
        except BackendError as exc:
            return False, f"Could not open file dialog: {exc}"
        if path is None:
            return False, None
        try:
            data = self.backend.read_binary_file(path)
        except BackendError as exc:
            return False, f"Failed to read image: {exc}"
        self.preview.load(data, path.name)
        self.draft.preview_path = str(path)
        return True, None

    @property
    def preview_handle(self) -> PreviewHandle | None:
        return self.preview.handle

    def validate(self) -> str | None:
        if not self.draft.entity_slug:
            return "Please select the target character/entity."
        if not self.draft.mod_name.strip():
            return "Please enter a mod name."
        if self.analysis is not None and self.analysis.has_directories and not self.draft.internal_root:
            return "Please select the mod root folder from the archive."
        return None

    def submit(self) -> tuple[bool, str | None]:
        """Import the archive; on success returns the target entity slug as message."""
        if self.analysis is None:
            return False, "No archive selected."
        problem = self.validate()
        if problem is not None:
            return False, problem
        draft = self.draft
        assert draft.entity_slug is not None
        request = ImportRequest(
            archive_path=self.analysis.file_path,
            target_entity_slug=draft.entity_slug,
            selected_internal_root=draft.internal_root,
            mod_name=draft.mod_name.strip(),
            description=draft.description.strip() or None,
            author=draft.author.strip() or None,
            category_tag=draft.category_tag.strip() or None,
            selected_preview_path=draft.preview_path,
        )
        self.importing = True
        try:
            self.backend.import_archive(request)
        except BackendError as exc:
            return False, f"Import Failed: {exc}"
        finally:
            self.importing = False
        logger.info("Imported %s into %s", request.mod_name, request.target_entity_slug)
        self.close()
        return True, request.target_entity_slug

    def close(self) -> None:
        """Drop the analysis and release any preview file."""
        self.analysis = None
        self.draft = ImportDraft()
        self.entities = []
        self.preview.clear()
