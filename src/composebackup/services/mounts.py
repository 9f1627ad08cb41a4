"""Container mount introspection for compose-backup."""

from typing import Dict

from composebackup.errors import RuntimeOperationError


class MountService:
    """Reads the mounted volumes of a live container."""

    def __init__(self, runtime, logger):
        self.runtime = runtime
        self.logger = logger

    def mounts(self, container_id: str) -> Dict[str, str]:
        """Map each mount to its in-container destination.

        Named mounts are keyed by name, unnamed ones (bind mounts) by their
        zero-based position in the inspect output.
        """
        container = self.runtime.inspect_container(container_id)

        destinations: Dict[str, str] = {}
        for index, mount in enumerate(container.get("Mounts") or []):
            destination = mount.get("Destination")
            if not destination:
                raise RuntimeOperationError(
                    f"Container {container_id} reported mount #{index} without a destination."
                )

            key = mount.get("Name") or str(index)
            if key in destinations:
                key = f"{key}_{index}"
            destinations[key] = destination

        self.logger.debug("Container %s mounts: %s", container_id, destinations)
        return destinations
