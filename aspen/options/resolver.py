"""Option resolution.

Walks the user's sequential choices against the option catalog.  Each stage
only offers the subset of the catalog reachable from the previous answers, so
an invalid combination can never be presented; a selection outside that
subset (from a CLI preset or a misbehaving chooser) is an
``InvalidOptionError``.

Prompting is a fold over ``PromptStage`` objects: every stage receives the
accumulated partial selection and returns its narrowed choices.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import partial, reduce
from typing import Any

from aspen.errors import InvalidOptionError
from aspen.options.catalog import CATALOG, PACKAGE_MANAGERS, OptionCatalog
from aspen.options.models import ProjectOptions
from aspen.utils import validate_project_name


@dataclass(frozen=True)
class Choice:
    """One selectable value offered by a stage."""

    value: str
    label: str
    description: str = ""
    selected: bool = False


@dataclass(frozen=True)
class PromptStage:
    """A single question in the interview."""

    key: str
    message: str
    choices: Callable[[Mapping[str, Any]], list[Choice]]
    multiple: bool = False


# chooser(stage, choices, partial_selection) -> str | list[str]
Chooser = Callable[[PromptStage, list[Choice], Mapping[str, Any]], Any]


class OptionResolver:
    """Computes valid-choice subsets and builds validated ``ProjectOptions``."""

    def __init__(self, catalog: OptionCatalog | None = None) -> None:
        self.catalog = catalog or CATALOG

    # -- Valid-choice subsets ----------------------------------------------

    def languages(self) -> list[Choice]:
        return [
            Choice(value=lang.name, label=lang.name, description=lang.description)
            for lang in self.catalog.languages.values()
        ]

    def frameworks(self, language: str) -> list[Choice]:
        lang = self.catalog.language(language)
        if lang is None:
            raise InvalidOptionError("language", language, list(self.catalog.languages))
        return [
            Choice(value=fw.name, label=fw.name, description=fw.description)
            for fw in lang.frameworks.values()
        ]

    def orms(self, language: str, framework: str) -> list[Choice]:
        fw = self.catalog.framework(language, framework)
        if fw is None:
            allowed = [c.value for c in self.frameworks(language)]
            raise InvalidOptionError("framework", framework, allowed)
        return [
            Choice(
                value=name,
                label=name,
                description=self.catalog.orms[name].description if name in self.catalog.orms else "",
                selected=name == "none",
            )
            for name in fw.orms
        ]

    def databases(self, orm: str) -> list[Choice]:
        rule = self.catalog.database_rule(orm)
        if rule is None:
            raise InvalidOptionError("orm", orm, list(self.catalog.orm_databases))
        return [
            Choice(
                value=name,
                label=name,
                description=self.catalog.databases[name].description
                if name in self.catalog.databases
                else "",
            )
            for name in rule.choices
        ]

    def features(self) -> list[Choice]:
        return [
            Choice(
                value=f.name,
                label=f.label or f.name,
                description=f.description,
                selected=f.default_selected,
            )
            for f in self.catalog.features.values()
        ]

    def package_managers(self) -> list[Choice]:
        return [
            Choice(value=pm, label=pm, selected=pm == "npm") for pm in PACKAGE_MANAGERS
        ]

    # -- Stages ------------------------------------------------------------

    def stages(self) -> list[PromptStage]:
        """The interview, in order."""
        return [
            PromptStage("language", "Select the programming language", lambda s: self.languages()),
            PromptStage(
                "framework", "Select a framework", lambda s: self.frameworks(s["language"])
            ),
            PromptStage(
                "orm", "Select an ORM", lambda s: self.orms(s["language"], s["framework"])
            ),
            PromptStage("database", "Select a database", lambda s: self.databases(s["orm"])),
            PromptStage(
                "features", "Select features to include", lambda s: self.features(), multiple=True
            ),
            PromptStage(
                "package_manager", "Select a package manager", lambda s: self.package_managers()
            ),
        ]

    def collect(
        self,
        chooser: Chooser,
        presets: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Run every stage and return the raw selections.

        Stages with a preset value skip the chooser; a single-choice stage
        (e.g. a database-locked ORM) is answered automatically.
        """
        step = partial(self._apply_stage, chooser, dict(presets or {}))
        return reduce(step, self.stages(), {})

    def _apply_stage(
        self,
        chooser: Chooser,
        presets: dict[str, Any],
        selection: dict[str, Any],
        stage: PromptStage,
    ) -> dict[str, Any]:
        choices = stage.choices(selection)
        allowed = [c.value for c in choices]

        if presets.get(stage.key) is not None:
            answer = presets[stage.key]
        elif not stage.multiple and len(choices) == 1:
            answer = choices[0].value
        else:
            answer = chooser(stage, choices, selection)

        if stage.multiple:
            values = [answer] if isinstance(answer, str) else list(answer)
            invalid = [v for v in values if v not in allowed]
            if invalid:
                raise InvalidOptionError(stage.key, ", ".join(invalid), allowed)
            return {**selection, stage.key: values}

        if answer not in allowed:
            raise InvalidOptionError(stage.key, answer, allowed)
        return {**selection, stage.key: answer}

    # -- Resolution --------------------------------------------------------

    def resolve(
        self,
        name: str,
        selections: Mapping[str, Any],
        description: str = "",
    ) -> ProjectOptions:
        """Validate *selections* edge by edge and build ``ProjectOptions``.

        Raises:
            InvalidProjectNameError: If *name* is empty or malformed.
            InvalidOptionError: Naming the first invalid edge.
        """
        validate_project_name(name)

        language = str(selections.get("language", ""))
        framework = str(selections.get("framework", ""))
        orm = str(selections.get("orm") or "none")
        rule = self.catalog.database_rule(orm)
        default_db = rule.forced if rule is not None else None
        database = str(selections.get("database") or default_db or "")
        features = list(selections.get("features") or [])
        package_manager = str(selections.get("package_manager") or "npm")

        error = self.catalog.find_invalid_edge(
            language, framework, orm, database, features, package_manager
        )
        if error is not None:
            raise error

        return ProjectOptions.model_validate(
            {
                "name": name,
                "language": language,
                "framework": framework,
                "orm": orm,
                "database": database,
                "features": frozenset(features),
                "package_manager": package_manager,
                "description": description,
            },
            context={"catalog": self.catalog},
        )

    def interview(
        self,
        name: str,
        chooser: Chooser,
        presets: Mapping[str, Any] | None = None,
        description: str = "",
    ) -> ProjectOptions:
        """Collect selections through *chooser* and resolve them."""
        validate_project_name(name)
        return self.resolve(name, self.collect(chooser, presets), description=description)
