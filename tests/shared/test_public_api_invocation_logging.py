"""Public API instrumentation: static coverage check plus runtime behavior."""

from __future__ import annotations

import ast
import logging
from pathlib import Path

import pytest

from packages.logbook_core.component_loader import (
    default_repo_root,
    import_registered_component_modules,
)
from packages.logbook_shared.envelope import (
    EnvelopeKind,
    failure,
    new_meta,
    success,
)
from packages.logbook_shared.errors import not_found_error
from packages.logbook_shared.logging import (
    CompletionContext,
    InvocationContext,
    public_api_instrumented,
)
from packages.logbook_shared.manifest import ServiceManifest, get_registry


class _CapturingConcern:
    def __init__(self) -> None:
        self.invocations: list[InvocationContext] = []
        self.completions: list[CompletionContext] = []

    def on_invocation(self, context: InvocationContext) -> None:
        self.invocations.append(context)

    def on_completion(self, context: CompletionContext) -> None:
        self.completions.append(context)


class _BrokenConcern:
    def on_invocation(self, context: InvocationContext) -> None:
        raise RuntimeError("sink down")

    def on_completion(self, context: CompletionContext) -> None:
        raise RuntimeError("sink down")


def _meta():
    return new_meta(
        kind=EnvelopeKind.COMMAND,
        source="test",
        principal="operator",
        trace_id="trace-1",
    )


def test_registered_services_decorate_public_api_methods() -> None:
    """Every abstract service method must be instrumented in its implementation."""
    repo_root = default_repo_root()
    failures: list[str] = []
    for service in _load_services():
        contract = _contract_methods(repo_root=repo_root, service=service)
        decorated = _decorated_methods(repo_root=repo_root, service=service)
        missing = sorted(contract - decorated)
        if missing:
            failures.append(f"{service.id}: {missing}")

    assert not failures, "Missing @public_api_instrumented:\n" + "\n".join(failures)


def test_instrumentation_reports_success_and_id_fields() -> None:
    concern = _CapturingConcern()

    @public_api_instrumented(
        component_id="service_review_workflow",
        id_fields=("entry_id", "category"),
        concerns=(concern,),
    )
    def sign_entry(*, meta, entry_id: str, category: str | None = None):
        return success(meta=meta, payload=entry_id)

    sign_entry(meta=_meta(), entry_id="01ABC")

    invocation = concern.invocations[0]
    assert invocation.api_name == "sign_entry"
    assert invocation.trace_id == "trace-1"
    assert invocation.references == {"entry_id": "01ABC"}
    assert concern.completions[0].success is True


def test_instrumentation_summarizes_envelope_errors() -> None:
    concern = _CapturingConcern()

    @public_api_instrumented(component_id="service_review_workflow", concerns=(concern,))
    def submit_entry(*, meta):
        return failure(
            meta=meta,
            errors=[not_found_error("Entry not found", code="NOT_FOUND_OR_UNAUTHORIZED")],
        )

    submit_entry(meta=_meta())

    completion = concern.completions[0]
    assert completion.success is False
    assert completion.errors == ["NOT_FOUND_OR_UNAUTHORIZED: Entry not found"]
    assert completion.error_categories == ["not_found"]


def test_instrumentation_reraises_and_records_exceptions() -> None:
    concern = _CapturingConcern()

    @public_api_instrumented(component_id="service_review_workflow", concerns=(concern,))
    def health(*, meta):
        raise ConnectionError("store offline")

    with pytest.raises(ConnectionError):
        health(meta=_meta())

    assert concern.completions[0].errors == ["ConnectionError: store offline"]
    assert concern.completions[0].error_categories == ["internal"]


def test_failing_concern_never_breaks_the_call(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.instrumentation")

    @public_api_instrumented(
        component_id="service_auto_review", logger=logger, concerns=(_BrokenConcern(),)
    )
    def get_all(*, meta):
        return success(meta=meta, payload={})

    with caplog.at_level(logging.INFO, logger="tests.instrumentation"):
        result = get_all(meta=_meta())

    assert result.ok
    messages = [record.getMessage() for record in caplog.records]
    assert "Public API invocation" in messages
    assert "Public API instrumentation concern failed" in messages


def test_decorator_requires_a_concern() -> None:
    with pytest.raises(ValueError):
        public_api_instrumented(component_id="service_auto_review")


def _load_services() -> tuple[ServiceManifest, ...]:
    import_registered_component_modules()
    return get_registry().list_services()


def _contract_methods(*, repo_root: Path, service: ServiceManifest) -> set[str]:
    names: set[str] = set()
    for root in sorted(str(item) for item in service.public_api_roots):
        module = ast.parse(_module_to_file(repo_root, root).read_text(encoding="utf-8"))
        for node in module.body:
            if isinstance(node, ast.ClassDef) and node.name.endswith("Service"):
                names.update(_public_functions(node))
    return names


def _decorated_methods(*, repo_root: Path, service: ServiceManifest) -> set[str]:
    names: set[str] = set()
    for root in sorted(str(item) for item in service.module_roots):
        path = _module_to_file(repo_root, f"{root}.implementation")
        module = ast.parse(path.read_text(encoding="utf-8"))
        for node in module.body:
            if not isinstance(node, ast.ClassDef):
                continue
            for child in node.body:
                if (
                    isinstance(child, ast.FunctionDef)
                    and not child.name.startswith("_")
                    and _has_public_api_instrumented(child)
                ):
                    names.add(child.name)
    return names


def _public_functions(node: ast.ClassDef) -> set[str]:
    return {
        child.name
        for child in node.body
        if isinstance(child, ast.FunctionDef) and not child.name.startswith("_")
    }


def _module_to_file(repo_root: Path, module: str) -> Path:
    path = repo_root / (module.replace(".", "/") + ".py")
    assert path.exists(), f"module file not found: {module}"
    return path


def _has_public_api_instrumented(node: ast.FunctionDef) -> bool:
    for decorator in node.decorator_list:
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        if isinstance(target, ast.Name) and target.id == "public_api_instrumented":
            return True
    return False
