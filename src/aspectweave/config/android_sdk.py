"""Android SDK boot classpath resolution.

The weaver needs the platform's android.jar on its bootclasspath. It is either
given explicitly in the configuration or derived from the SDK location and the
compile SDK platform name.
"""

import os
from pathlib import Path
from typing import List, Mapping, Optional

from .weave_config import WeaveConfig

SDK_ENV_VARS = ("ANDROID_HOME", "ANDROID_SDK_ROOT")


class AndroidSdkError(Exception):
    """Raised when the Android platform jar cannot be located."""

    pass


def find_sdk_dir(config: WeaveConfig, environ: Mapping[str, str] = os.environ) -> Optional[Path]:
    """Return the Android SDK directory from config or environment, if any."""
    if config.android_sdk:
        return Path(config.android_sdk)
    for var in SDK_ENV_VARS:
        value = environ.get(var)
        if value:
            return Path(value)
    return None


def resolve_boot_classpath(
    config: WeaveConfig, environ: Mapping[str, str] = os.environ
) -> List[str]:
    """Resolve the boot classpath entries for a weave run.

    Args:
        config: Resolved weave configuration
        environ: Environment used for SDK discovery

    Returns:
        Boot classpath entries in the order they should be passed

    Raises:
        AndroidSdkError: If compile_sdk is set but android.jar is missing
    """
    if config.bootclasspath:
        return list(config.bootclasspath)

    if not config.compile_sdk:
        return []

    sdk_dir = find_sdk_dir(config, environ)
    if sdk_dir is None:
        raise AndroidSdkError(
            f"compile_sdk is '{config.compile_sdk}' but no Android SDK was found. "
            + "Set android_sdk in aspectj.ini or ANDROID_HOME."
        )

    android_jar = sdk_dir / "platforms" / config.compile_sdk / "android.jar"
    if not android_jar.exists():
        raise AndroidSdkError(f"android.jar not found: {android_jar}")

    return [str(android_jar.absolute())]
