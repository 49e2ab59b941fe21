#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2view/utils/decorators.py
"""Utility decorators for md2view.

``requires_dependencies`` guards features backed by optional extras and
``debug_timer`` logs how long a block took when DEBUG logging is on.

"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, List, Tuple

from md2view.exceptions import DependencyError
from md2view.utils.packages import check_requirement


def requires_dependencies(feature_name: str, packages: List[Tuple[str, str, str]]) -> Callable:
    """Raise ``DependencyError`` unless every package of an extra is usable.

    The check runs on each call, so importing a module that uses an optional
    feature never fails; only calling the feature does.

    Parameters
    ----------
    feature_name : str
        Name of the feature and of the md2view extra providing it
        (e.g., "highlight")
    packages : list of tuple
        ``(install_name, import_name, version_spec)`` triples, for example
        ``("Pygments", "pygments", ">=2.15.0")``. An empty ``version_spec``
        accepts any installed version.

    Returns
    -------
    Callable
        Decorator applying the check

    Examples
    --------
        >>> @requires_dependencies("highlight", [("Pygments", "pygments", ">=2.15.0")])
        ... def highlight_code(code, language, theme):
        ...     from pygments import highlight
        ...     ...

    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            statuses = [check_requirement(*package) for package in packages]
            unsatisfied = [status for status in statuses if not status.satisfied]
            if unsatisfied:
                missing = [(s.install_name, s.version_spec) for s in unsatisfied if not s.importable]
                mismatches = [
                    (s.install_name, s.version_spec, s.installed_version or "unknown") for s in unsatisfied if s.importable
                ]
                import_error = next((s.import_error for s in unsatisfied if s.import_error is not None), None)
                raise DependencyError(
                    feature_name=feature_name,
                    missing_packages=missing,
                    version_mismatches=mismatches,
                    original_import_error=import_error,
                ) from import_error

            return func(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Time a block and log the elapsed time at DEBUG level.

    Parameters
    ----------
    logger : logging.Logger
        Logger instance to use for DEBUG messages
    operation : str
        Description of the operation being timed (e.g., "Rendering markdown")

    Examples
    --------
        >>> logger = logging.getLogger(__name__)
        >>> with debug_timer(logger, "Rendering markdown"):
        ...     view = render_markdown(context, source)

    """
    if logger.isEnabledFor(logging.DEBUG):
        start_time = time.perf_counter()
        yield
        elapsed = time.perf_counter() - start_time
        logger.debug(f"{operation} completed in {elapsed:.4f}s")
    else:
        yield
