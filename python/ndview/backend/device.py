from typing import Any

from . import ndarray_backend_numpy


class Device:
    """Named handle on a buffer backend module.

    Attribute lookups fall through to the module, so ``device.Array(n)``
    allocates backend storage and ``device.fill(handle, 0)`` runs the
    backend's kernel.
    """

    def __init__(self, name: str, module: Any) -> None:
        self.name = name
        self.module = module

    def __repr__(self) -> str:
        return f"{self.name}()"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Device) and other.module is self.module

    def __hash__(self) -> int:
        return hash(self.module)

    def __getattr__(self, name: str) -> Any:
        return getattr(self.module, name)


def cpu_numpy() -> Device:
    return Device("cpu_numpy", ndarray_backend_numpy)


def default_device() -> Device:
    return cpu_numpy()
