#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from types import FunctionType

if sys.version_info >= (3, 9):
    from collections.abc import MutableMapping
else:
    from typing import MutableMapping


def _issubmodule(module_name: str | None, package_name: str, /) -> bool:
    return module_name is not None and module_name.startswith(
        f"{package_name}."
    )


def export(namespace: MutableMapping[str, object], /) -> None:
    """
    Make the public classes and functions of *namespace* appear as members of
    its package, so that their representations and pickles refer to the
    public names instead of the private modules that define them.
    """

    package_name = namespace["__name__"]

    for name, value in namespace.items():
        if name.startswith("_"):
            continue

        if isinstance(value, (type, FunctionType)) and _issubmodule(
            value.__module__,
            package_name,
        ):
            value.__module__ = package_name
