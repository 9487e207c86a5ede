"""K2 Entity Catalog.

Concrete record types for the objects returned by the HMC REST API. Each
class only declares its schema fields (``field_at``) and the relationship or
nested-collection accessors it needs; field extraction is done by the
generic machinery in ``hmc_k2.domain.records``.

Top-level types (EntryRecord subclasses) are built from Atom entries and are
registered by type name in ``hmc_k2.domain.registry``. Nested types (Record
subclasses) are built from subtrees of a top-level object.
"""

from typing import Optional

from pydantic import Field

from hmc_k2.domain import links, xpath
from hmc_k2.domain.records import EntryRecord, Record, field_at


# ============================================================================
# Management Console and Managed System
# ============================================================================

class ManagementConsole(EntryRecord):
    """HMC information."""

    name: Optional[str] = field_at("ManagementConsoleName")
    build_level: Optional[str] = field_at("VersionInfo/BuildLevel")
    version: Optional[str] = field_at("BaseVersion")

    def managed_systems_uuids(self) -> list[str]:
        return self.ids_from_links("ManagedSystems")


class IOAdapter(Record):
    """I/O Adapter information."""

    id: Optional[str] = field_at("AdapterID")
    description: Optional[str] = field_at("Description")
    name: Optional[str] = field_at("DeviceName")
    type: Optional[str] = field_at("DeviceType")
    dr_name: Optional[str] = field_at("DynamicReconfigurationConnectorName")
    udid: Optional[str] = field_at("UniqueDeviceID")


class ManagedSystem(EntryRecord):
    """Managed System information."""

    name: Optional[str] = field_at("SystemName")
    state: Optional[str] = field_at("State")
    hostname: Optional[str] = field_at("Hostname")
    ipaddr: Optional[str] = field_at("PrimaryIPAddress")
    fwversion: Optional[str] = field_at("SystemFirmware")
    memory: Optional[str] = field_at("AssociatedSystemMemoryConfiguration/InstalledSystemMemory")
    avail_mem: Optional[str] = field_at("AssociatedSystemMemoryConfiguration/CurrentAvailableSystemMemory")
    cpus: Optional[str] = field_at("AssociatedSystemProcessorConfiguration/InstalledSystemProcessorUnits")
    avail_cpus: Optional[str] = field_at("AssociatedSystemProcessorConfiguration/CurrentAvailableSystemProcessorUnits")
    mtype: Optional[str] = field_at("MachineTypeModelAndSerialNumber/MachineType")
    model: Optional[str] = field_at("MachineTypeModelAndSerialNumber/Model")
    serial: Optional[str] = field_at("MachineTypeModelAndSerialNumber/SerialNumber")

    def lpars_uuids(self) -> list[str]:
        return self.ids_from_links("AssociatedLogicalPartitions")

    def vioses_uuids(self) -> list[str]:
        return self.ids_from_links("AssociatedVirtualIOServers")

    def io_adapters(self) -> list[IOAdapter]:
        return self.children(
            "AssociatedSystemIOConfiguration/IOSlots/IOSlot/RelatedIOAdapter/IOAdapter",
            IOAdapter
        )

    def vswitches_uuids(self) -> list[str]:
        return self.ids_from_links("AssociatedSystemIOConfiguration/AssociatedSystemVirtualNetwork/VirtualSwitches")

    def networks_uuids(self) -> list[str]:
        return self.ids_from_links("AssociatedSystemIOConfiguration/AssociatedSystemVirtualNetwork/VirtualNetworks")


# ============================================================================
# Partitions
# ============================================================================

class EthernetBackingDevice(IOAdapter):
    pass


class HostEthernetAdapterLogicalPort(EthernetBackingDevice):
    """LP-HEA information."""

    macaddr: Optional[str] = field_at("MACAddress")
    port_id: Optional[str] = field_at("LogicalPortID")
    state: Optional[str] = field_at("PortState")
    location: Optional[str] = field_at("HEALogicalPortPhysicalLocation")


class BasePartition(EntryRecord):
    """Common base for logical partitions and virtual I/O servers.

    Not registered: the K2 API only returns the concrete partition types.
    ``name`` is the one field that can be written back to the document, so
    that a renamed partition can be sent back to the console.
    """

    name: Optional[str] = field_at("PartitionName")
    id: Optional[str] = field_at("PartitionID")
    state: Optional[str] = field_at("PartitionState")
    type: Optional[str] = field_at("PartitionType")
    memory: Optional[str] = field_at("PartitionMemoryConfiguration/CurrentMemory")
    dedicated: Optional[str] = field_at("PartitionProcessorConfiguration/HasDedicatedProcessors")
    rmc_state: Optional[str] = field_at("ResourceMonitoringControlState")
    rmc_ipaddr: Optional[str] = field_at("ResourceMonitoringIPAddress")
    os: Optional[str] = field_at("OperatingSystemVersion")
    ref_code: Optional[str] = field_at("ReferenceCode")
    procs: Optional[str] = field_at(
        "PartitionProcessorConfiguration/CurrentDedicatedProcessorConfiguration/CurrentProcessors"
    )
    proc_units: Optional[str] = field_at(
        "PartitionProcessorConfiguration/CurrentSharedProcessorConfiguration/CurrentProcessingUnits"
    )
    vprocs: Optional[str] = field_at(
        "PartitionProcessorConfiguration/CurrentSharedProcessorConfiguration/AllocatedVirtualProcessors"
    )

    def sys_uuid(self) -> Optional[str]:
        return self.id_from_link("AssociatedManagedSystem")

    def net_adap_uuids(self) -> list[str]:
        return self.ids_from_links("ClientNetworkAdapters")

    def lhea_ports(self) -> list[HostEthernetAdapterLogicalPort]:
        return self.children(
            "HostEthernetAdapterLogicalPorts/HostEthernetAdapterLogicalPort",
            HostEthernetAdapterLogicalPort
        )

    def sriov_elp_uuids(self) -> list[str]:
        return self.ids_from_links("SRIOVEthernetLogicalPorts")

    def rename(self, name: str) -> None:
        """Set the partition name in both the record and the document.

        Raises:
            FieldNotFoundError: If the document has no PartitionName element
        """
        self._update_field("name", name)


class LogicalPartition(BasePartition):
    """Logical Partition information."""

    def vnic_dedicated_uuids(self) -> list[str]:
        return self.ids_from_links("DedicatedVirtualNICs")


# ============================================================================
# Virtual SCSI storage
# ============================================================================

class VirtualSCSIStorage(Record):
    # Matches the K2 schema hierarchy; declares no fields of its own.
    pass


class PhysicalVolume(VirtualSCSIStorage):
    """Physical Volume information."""

    location: Optional[str] = field_at("LocationCode")
    description: Optional[str] = field_at("Description")
    is_available: Optional[str] = field_at("AvailableForUsage")
    capacity: Optional[str] = field_at("VolumeCapacity")
    name: Optional[str] = field_at("VolumeName")
    is_fc: Optional[str] = field_at("IsFibreChannelBacked")
    udid: Optional[str] = field_at("VolumeUniqueID")


class VirtualOpticalMedia(VirtualSCSIStorage):
    """Virtual CD-ROM information."""

    name: Optional[str] = field_at("MediaName")
    udid: Optional[str] = field_at("MediaUDID")
    mount_opts: Optional[str] = field_at("MountType")
    size: Optional[str] = field_at("Size", description="Size in GiB")


class LogicalUnit(VirtualSCSIStorage):
    """SSP LU information."""

    name: Optional[str] = field_at("UnitName")
    capacity: Optional[str] = field_at("UnitCapacity")
    udid: Optional[str] = field_at("UniqueDeviceID")
    thin: Optional[str] = field_at("ThinDevice")
    type: Optional[str] = field_at("LogicalUnitType")
    in_use: Optional[str] = field_at("InUse")


class VirtualMediaRepository(Record):
    """Virtual Media Repository information."""

    name: Optional[str] = field_at("RepositoryName")
    size: Optional[str] = field_at("RepositorySize", description="Size in GiB")

    def vopts(self) -> list[VirtualOpticalMedia]:
        return self.children("OpticalMedia/VirtualOpticalMedia", VirtualOpticalMedia)


class VirtualIOServer(BasePartition):
    """VIOS information."""

    def pvs(self) -> list[PhysicalVolume]:
        return self.children("PhysicalVolumes/PhysicalVolume", PhysicalVolume)

    def rep(self) -> Optional[VirtualMediaRepository]:
        return self.child("MediaRepositories/VirtualMediaRepository", VirtualMediaRepository)


# ============================================================================
# Virtual networking
# ============================================================================

class VirtualSwitch(EntryRecord):
    """Virtual Switch information."""

    id: Optional[str] = field_at("SwitchID")
    mode: Optional[str] = field_at("SwitchMode", description='"VEB" or "VEPA"')
    name: Optional[str] = field_at("SwitchName")

    def sys_uuid(self) -> Optional[str]:
        # .../ManagedSystem/<sys_uuid>/VirtualSwitch/<uuid>
        return links.id_from_link(self.href, -3)

    def networks_uuids(self) -> list[str]:
        return self.ids_from_links("VirtualNetworks")


class VirtualNetwork(EntryRecord):
    """Virtual Network information."""

    name: Optional[str] = field_at("NetworkName")
    vlan_id: Optional[str] = field_at("NetworkVLANID")
    vswitch_id: Optional[str] = field_at("VswitchID")
    tagged: Optional[str] = field_at("TaggedNetwork")

    def vswitch_uuid(self) -> Optional[str]:
        return self.id_from_link("AssociatedSwitch")

    def lpars_uuids(self) -> list[str]:
        return self.ids_from_links("ConnectedPartitions")


class VirtualIOAdapter(EntryRecord):
    """Virtual I/O Adapter information."""

    type: Optional[str] = field_at("AdapterType", description='"Server", "Client" or "Unknown"')
    location: Optional[str] = field_at("LocationCode")
    slot: Optional[str] = field_at("VirtualSlotNumber")
    required: Optional[str] = field_at("RequiredAdapter")


class VirtualEthernetAdapter(VirtualIOAdapter):
    """Virtual Ethernet Adapter information."""

    macaddr: Optional[str] = field_at("MACAddress")
    vswitch_id: Optional[str] = field_at("VirtualSwitchID")
    vlan_id: Optional[str] = field_at("PortVLANID")
    location: Optional[str] = field_at("LocationCode")

    def vswitch_uuid(self) -> Optional[str]:
        uuids = self.ids_from_links("AssociatedVirtualSwitch")
        return uuids[0] if uuids else None


class ClientNetworkAdapter(VirtualEthernetAdapter):
    """Client Network Adapter information."""

    def networks_uuids(self) -> list[str]:
        return self.ids_from_links("VirtualNetworks")


class VirtualNICDedicated(VirtualIOAdapter):
    """Virtual NIC dedicated information."""

    # Overrides the LocationCode path inherited from VirtualIOAdapter.
    location: Optional[str] = field_at("DynamicReconfigurationConnectorName")
    macaddr: Optional[str] = field_at("Details/MACAddress")
    os_devname: Optional[str] = field_at("Details/OSDeviceName")
    port_vlan_id: Optional[str] = field_at("Details/PortVLANID")


class SRIOVConfiguredLogicalPort(EntryRecord):
    """SR-IOV Configured Logical Port information."""

    port_id: Optional[str] = field_at("LogicalPortID")
    port_vlan_id: Optional[str] = field_at("PortVLANID")
    location: Optional[str] = field_at("LocationCode")
    dr_name: Optional[str] = field_at("DynamicReconfigurationConnectorName")
    devname: Optional[str] = field_at("DeviceName")
    capacity: Optional[str] = field_at("ConfiguredCapacity")

    def lpars_uuids(self) -> list[str]:
        return self.ids_from_links("AssociatedLogicalPartitions")


class SRIOVEthernetLogicalPort(SRIOVConfiguredLogicalPort):
    """SR-IOV Ethernet Logical Port information."""

    macaddr: Optional[str] = field_at("MACAddress")


# ============================================================================
# Shared storage pools
# ============================================================================

class Node(Record):
    """Cluster node information."""

    hostname: Optional[str] = field_at("HostName")
    lpar_id: Optional[str] = field_at("PartitionID")
    state: Optional[str] = field_at("State")
    ioslevel: Optional[str] = field_at("VirtualIOServerLevel")

    def vios_uuid(self) -> Optional[str]:
        return self.id_from_link("VirtualIOServer")


class Cluster(EntryRecord):
    """Cluster information."""

    name: Optional[str] = field_at("ClusterName")
    id: Optional[str] = field_at("ClusterID")
    tier_capable: Optional[str] = field_at("ClusterCapabilities/IsTierCapable")

    def ssp_uuid(self) -> Optional[str]:
        return self.id_from_link("ClusterSharedStoragePool")

    def nodes(self) -> list[Node]:
        return self.children("Node/Node", Node)


class SharedStoragePool(EntryRecord):
    """SSP information."""

    name: Optional[str] = field_at("StoragePoolName")
    udid: Optional[str] = field_at("UniqueDeviceID")
    capacity: Optional[str] = field_at("Capacity")
    free_space: Optional[str] = field_at("FreeSpace")
    overcommit: Optional[str] = field_at("OverCommitSpace")
    total_lu_size: Optional[str] = field_at("TotalLogicalUnitSize")
    alert_threshold: Optional[str] = field_at("AlertThreshold")

    def cluster_uuid(self) -> Optional[str]:
        return self.id_from_link("AssociatedCluster")

    def pvs(self) -> list[PhysicalVolume]:
        return self.children("PhysicalVolumes/PhysicalVolume", PhysicalVolume)

    def tiers_uuids(self) -> list[str]:
        return self.ids_from_links("AssociatedTiers")

    def lus(self) -> list[LogicalUnit]:
        return self.children("LogicalUnits/LogicalUnit", LogicalUnit)


class Tier(EntryRecord):
    """SSP tier information."""

    name: Optional[str] = field_at("Name")
    udid: Optional[str] = field_at("UniqueDeviceID")
    type: Optional[str] = field_at("Type")
    capacity: Optional[str] = field_at("Capacity")
    total_lu_size: Optional[str] = field_at("TotalLogicalUnitSize")
    is_default: Optional[str] = field_at("IsDefault")
    free_space: Optional[str] = field_at("FreeSpace")

    def ssp_uuid(self) -> Optional[str]:
        return self.id_from_link("AssociatedSharedStoragePool")

    def lus_uuids(self) -> list[str]:
        return self.ids_from_links("AssociatedLogicalUnits")


# ============================================================================
# Templates, events, errors and jobs
# ============================================================================

class PartitionTemplateSummary(EntryRecord):
    name: Optional[str] = field_at("partitionTemplateName")


class PartitionTemplate(EntryRecord):
    name: Optional[str] = field_at("partitionTemplateName")


class Event(EntryRecord):
    """HMC Event.

    ``usertask`` is not read from the document; event consumers attach the
    user task they fetched for events that reference one.
    """

    id: Optional[str] = field_at("EventID")
    type: Optional[str] = field_at("EventType")
    data: Optional[str] = field_at("EventData")
    detail: Optional[str] = field_at("EventDetail")
    usertask: Optional[dict] = Field(None, description="User task attached by the caller")


class HttpErrorResponse(EntryRecord):
    """Error response from HMC."""

    status: Optional[str] = field_at("HTTPStatus")
    uri: Optional[str] = field_at("RequestURI")
    reason: Optional[str] = field_at("ReasonCode")
    message: Optional[str] = field_at("Message")


class JobResponse(EntryRecord):
    """Job Response."""

    id: Optional[str] = field_at("JobID")
    status: Optional[str] = field_at("Status")
    message: Optional[str] = field_at("ResponseException/Message")

    def results(self) -> dict[str, Optional[str]]:
        """Return the job result parameters as a name to value mapping."""
        results = {}
        for param in xpath.iter_find(self.xml, "Results/JobParameter"):
            name = xpath.text(param, "ParameterName")
            if name is not None:
                results[name] = xpath.text(param, "ParameterValue")
        return results


TOP_LEVEL_TYPES = (
    ManagementConsole,
    ManagedSystem,
    LogicalPartition,
    VirtualIOServer,
    VirtualSwitch,
    VirtualNetwork,
    VirtualIOAdapter,
    VirtualEthernetAdapter,
    ClientNetworkAdapter,
    VirtualNICDedicated,
    SRIOVConfiguredLogicalPort,
    SRIOVEthernetLogicalPort,
    Cluster,
    SharedStoragePool,
    Tier,
    PartitionTemplateSummary,
    PartitionTemplate,
    Event,
    HttpErrorResponse,
    JobResponse,
)
