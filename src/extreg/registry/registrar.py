"""Instantiation and host registration of discovered extension functions."""

from __future__ import annotations

import inspect
import logging
import sys
from typing import Iterable

from extreg.errors import RegistrationError
from extreg.function import ExtensionFunctionDefinition, QualifiedName
from extreg.host import ExtensibleConfiguration
from extreg.registry.types import LoadDiagnostic, LoadErrorKind, RegistrationResult

logger = logging.getLogger(__name__)

__all__ = ["instantiate", "register_all", "add_namespace"]


def _type_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def _source(cls: type) -> str:
    module = sys.modules.get(cls.__module__)
    return getattr(module, "__file__", None) or cls.__module__


def _requires_arguments(cls: type) -> bool:
    try:
        sig = inspect.signature(cls)
    except (TypeError, ValueError):
        return False
    return any(
        p.default is inspect.Parameter.empty and p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.KEYWORD_ONLY)
        for p in sig.parameters.values()
    )


def instantiate(
    cls: type[ExtensionFunctionDefinition],
) -> tuple[ExtensionFunctionDefinition | None, LoadDiagnostic | None]:
    """Construct ``cls`` with no arguments.

    Returns ``(instance, None)`` on success or ``(None, diagnostic)``.
    """
    source = _source(cls)
    if _requires_arguments(cls):
        return None, LoadDiagnostic(
            kind=LoadErrorKind.MISSING_CONSTRUCTOR,
            source=source,
            message="Cannot find an empty constructor in the plugin",
            type_name=_type_name(cls),
        )
    if inspect.isabstract(cls):
        return None, LoadDiagnostic(
            kind=LoadErrorKind.INSTANTIATION_FAILED,
            source=source,
            message=f"Cannot instantiate abstract class {cls.__qualname__}",
            type_name=_type_name(cls),
        )
    try:
        return cls(), None
    except Exception as e:
        return None, LoadDiagnostic(
            kind=LoadErrorKind.INSTANTIATION_FAILED,
            source=source,
            message=str(e) or type(e).__name__,
            type_name=_type_name(cls),
        )


def add_namespace(namespaces: list[QualifiedName], qname: QualifiedName) -> bool:
    """Append ``qname`` unless a name with the same prefix and URI is present."""
    if any(q.prefix == qname.prefix and q.uri == qname.uri for q in namespaces):
        return False
    namespaces.append(qname)
    return True


def register_all(
    implementations: Iterable[type[ExtensionFunctionDefinition]],
    configuration: ExtensibleConfiguration,
    namespaces: list[QualifiedName] | None = None,
) -> RegistrationResult:
    """Instantiate each class and register it with ``configuration``.

    Each class is handled independently: a failure is logged, recorded as a
    diagnostic and does not stop the remaining classes. Namespaces are
    appended to ``namespaces`` (a fresh list when None), first one wins.
    """
    result = RegistrationResult(namespaces=namespaces if namespaces is not None else [])

    for cls in implementations:
        instance, diagnostic = instantiate(cls)
        if instance is None:
            logger.error("Failed to instantiate extension function '%s': %s", diagnostic.type_name, diagnostic.message)
            result.diagnostics.append(diagnostic)
            continue

        try:
            qname = instance.function_qname
            if not isinstance(qname, QualifiedName):
                raise RegistrationError(
                    type_name=_type_name(cls),
                    reason=f"function_qname returned {type(qname).__name__}, expected QualifiedName",
                )
            configuration.register_extension_function(instance)
        except Exception as e:
            logger.error("Failed to register extension function '%s': %s", _type_name(cls), e)
            result.diagnostics.append(
                LoadDiagnostic(
                    kind=LoadErrorKind.REGISTRATION_FAILED,
                    source=_source(cls),
                    message=str(e),
                    type_name=_type_name(cls),
                )
            )
            continue

        result.registered.append(instance)
        if add_namespace(result.namespaces, qname):
            logger.debug("Added namespace %s", qname.xmlns)

    return result
