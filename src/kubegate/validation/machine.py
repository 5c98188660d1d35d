# src/kubegate/validation/machine.py

from ..core.exceptions import ConfigurationError, KubeGateError, PolicyViolation, UnitFormatError
from ..models.spec import MachineSizingSpec
from ..utils.units import parse_memory_to_gb, parse_storage_to_gb
from .base import BaseValidator, ResourceType, ValidationContext

MIN_VCPU_SOCKETS = 2
MIN_VCPUS_PER_SOCKET = 1
MIN_TOTAL_VCPUS = 2
MIN_MEMORY_GB = 4
MIN_SYSTEM_DISK_GB = 40


class MachineConfigValidator(BaseValidator):
    """
    Checks the sizing of a NutanixMachineConfig and that its Prism Central
    references are filled in. Whether those references exist is checked by
    the platform validators registered next to this one.
    """

    resource_type = ResourceType.MACHINE_CONFIG

    def __init__(self, machine_config: MachineSizingSpec):
        self.machine_config = machine_config

    @property
    def instance_name(self) -> str:
        return self.machine_config.name if self.machine_config is not None else ""

    def get_resource(self, ctx: ValidationContext) -> MachineSizingSpec:
        return self.machine_config

    def validate(self, ctx: ValidationContext) -> None:
        if self.machine_config is None:
            raise ConfigurationError("machine config is nil")

        checks = [
            ("CPU configuration validation failed", self.validate_cpu_configuration),
            ("memory configuration validation failed", self.validate_memory_configuration),
            ("disk configuration validation failed", self.validate_disk_configuration),
            ("resource reference validation failed", self.validate_resource_references),
        ]
        for description, check in checks:
            try:
                check()
            except KubeGateError as e:
                raise type(e)(f"{description}: {e}") from e

    def validate_cpu_configuration(self) -> None:
        machine = self.machine_config
        if machine.vcpu_sockets < MIN_VCPU_SOCKETS:
            raise PolicyViolation(f"vcpuSockets must be at least {MIN_VCPU_SOCKETS}, got {machine.vcpu_sockets}")

        if machine.vcpus_per_socket < MIN_VCPUS_PER_SOCKET:
            raise PolicyViolation(
                f"vcpusPerSocket must be at least {MIN_VCPUS_PER_SOCKET}, got {machine.vcpus_per_socket}"
            )

        if machine.vcpus < MIN_TOTAL_VCPUS:
            raise PolicyViolation(
                f"total vCPUs must be at least {MIN_TOTAL_VCPUS}, got {machine.vcpus} "
                f"(sockets: {machine.vcpu_sockets}, per socket: {machine.vcpus_per_socket})"
            )

    def validate_memory_configuration(self) -> None:
        memory_size = self.machine_config.memory_size
        if not memory_size:
            raise ConfigurationError("memorySize is required")

        try:
            gib = parse_memory_to_gb(memory_size)
        except UnitFormatError as e:
            raise UnitFormatError(f"invalid memorySize format '{memory_size}': {e}") from e

        if gib < MIN_MEMORY_GB:
            raise PolicyViolation(f"memorySize must be at least {MIN_MEMORY_GB} GiB, got {gib} GiB")

    def validate_disk_configuration(self) -> None:
        disk_size = self.machine_config.system_disk_size
        if not disk_size:
            raise ConfigurationError("systemDiskSize is required")

        try:
            gib = parse_storage_to_gb(disk_size)
        except UnitFormatError as e:
            raise UnitFormatError(f"invalid systemDiskSize format '{disk_size}': {e}") from e

        if gib < MIN_SYSTEM_DISK_GB:
            raise PolicyViolation(f"systemDiskSize must be at least {MIN_SYSTEM_DISK_GB} GiB, got {gib} GiB")

    def validate_resource_references(self) -> None:
        machine = self.machine_config
        references = [
            (machine.cluster_name, "nutanix cluster reference is required"),
            (machine.image_name, "image name reference is required"),
            (machine.subnet_name, "subnet name reference is required"),
            (machine.project_name, "nutanix project name reference is required"),
        ]
        for value, message in references:
            if not value:
                raise ConfigurationError(message)
