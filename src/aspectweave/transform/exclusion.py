"""Exclusion classifier.

Decides whether an artifact belongs to an excluded dependency by looking for
the rule's group/module path fragment in the artifact's absolute path. Dependency
caches lay artifacts out as .../<group>/<module>/..., which is what makes the
substring test work.
"""

from pathlib import Path
from typing import Iterable, Union

from ..config.weave_config import ExcludeRule


def is_excluded(artifact_path: Union[str, Path], rules: Iterable[ExcludeRule]) -> bool:
    """Check an artifact path against the exclude rules.

    Args:
        artifact_path: Path of the directory or archive
        rules: Configured exclude rules

    Returns:
        True on the first matching rule, False otherwise
    """
    absolute = str(Path(artifact_path).absolute())
    for rule in rules:
        if rule.fragment() in absolute:
            return True
    return False
