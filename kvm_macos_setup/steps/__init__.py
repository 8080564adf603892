from .step_10_install_packages import InstallPackagesStep
from .step_20_sync_toolkit import SyncToolkitStep
from .step_30_configure_kvm import ConfigureKvmStep
from .step_40_join_groups import JoinGroupsStep
from .step_50_fetch_base_image import FetchBaseImageStep
from .step_55_convert_base_image import ConvertBaseImageStep
from .step_60_create_disk import CreateDiskStep
from .step_70_customize_resources import CustomizeResourcesStep
from .step_90_launch import LaunchStep

__all__ = [
    "InstallPackagesStep",
    "SyncToolkitStep",
    "ConfigureKvmStep",
    "JoinGroupsStep",
    "FetchBaseImageStep",
    "ConvertBaseImageStep",
    "CreateDiskStep",
    "CustomizeResourcesStep",
    "LaunchStep",
]
