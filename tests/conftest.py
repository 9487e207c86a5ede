"""Shared K2 response fixtures.

The documents mirror the shape of real HMC responses: Atom envelope in the
Atom namespace, UOM content in the UOM namespace with a per-type prefix.
"""

import pytest

HMC = "https://hmc.example.com:12443/rest/api/uom"
SYS_UUID = "7f3c2a1e-5b4d-3e2f-9a8b-1c0d2e3f4a5b"
LPAR1_UUID = "2b1a0c9d-8e7f-4a6b-9c5d-4e3f2a1b0c9d"
LPAR2_UUID = "3c2b1d0e-9f8a-4b7c-8d6e-5f4a3b2c1d0e"
VIOS_UUID = "4d3c2e1f-0a9b-4c8d-9e7f-6a5b4c3d2e1f"
VSWITCH_UUID = "5e4d3f2a-1b0c-4d9e-8f7a-7b6c5d4e3f2a"
VNET_UUID = "6f5e4a3b-2c1d-4e0f-9a8b-8c7d6e5f4a3b"

UOM_NS = "http://www.ibm.com/xmlns/systems/power/firmware/uom/mc/2012_10/"


def make_entry(type_name: str, content: str, uuid: str = SYS_UUID, published: str = "2024-03-14T09:26:53.120Z",
               href: str = None, etag: str = "-1201531512") -> str:
    """Build an Atom entry wrapping one UOM object."""
    href = href or f"{HMC}/{type_name}/{uuid}"
    published_elem = f"<published>{published}</published>" if published is not None else ""
    etag_elem = (
        f'<etag:etag xmlns:etag="{UOM_NS}">{etag}</etag:etag>' if etag is not None else ""
    )
    return f"""<entry xmlns="http://www.w3.org/2005/Atom" xmlns:ns2="http://a9.com/-/spec/opensearch/1.1/">
    <id>{uuid}</id>
    <title>{type_name}</title>
    {published_elem}
    <link rel="SELF" href="{href}"/>
    <author><name>IBM Power Systems Management Console</name></author>
    {etag_elem}
    <content type="application/vnd.ibm.powervm.uom+xml; type={type_name}">
        <{type_name}:{type_name} xmlns:{type_name}="{UOM_NS}" xmlns="{UOM_NS}" schemaVersion="V1_0">
            <Metadata><Atom/></Metadata>
            {content}
        </{type_name}:{type_name}>
    </content>
</entry>"""


def make_feed(*entries: str) -> str:
    """Wrap entries in an Atom feed."""
    body = "\n".join(entries)
    return f"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<feed xmlns="http://www.w3.org/2005/Atom" xmlns:ns2="http://a9.com/-/spec/opensearch/1.1/">
    <id>feed-id</id>
    <updated>2024-03-14T09:26:53.120Z</updated>
    {body}
</feed>"""


MANAGED_SYSTEM_CONTENT = f"""
    <AssociatedLogicalPartitions kb="CUD" kxe="false">
        <link href="{HMC}/ManagedSystem/{SYS_UUID}/LogicalPartition/{LPAR1_UUID}" rel="related"/>
        <link href="{HMC}/ManagedSystem/{SYS_UUID}/LogicalPartition/{LPAR2_UUID}" rel="related"/>
    </AssociatedLogicalPartitions>
    <AssociatedSystemIOConfiguration kb="ROO" kxe="false">
        <IOSlots>
            <IOSlot>
                <RelatedIOAdapter>
                    <IOAdapter>
                        <AdapterID>553844757</AdapterID>
                        <Description>PCIe2 4-port 1GbE Adapter</Description>
                        <DeviceName>PCIe2 4-port 1GbE Adapter</DeviceName>
                        <DeviceType>physicalDevice</DeviceType>
                        <DynamicReconfigurationConnectorName>U78CB.001.WZS06RG-P1-C7</DynamicReconfigurationConnectorName>
                        <UniqueDeviceID>553844757</UniqueDeviceID>
                    </IOAdapter>
                </RelatedIOAdapter>
            </IOSlot>
            <IOSlot>
                <RelatedIOAdapter>
                    <IOAdapter>
                        <AdapterID>553713680</AdapterID>
                        <Description>Quad 8 Gigabit Fibre Channel LP Adapter</Description>
                        <DeviceName>Quad 8 Gigabit Fibre Channel LP Adapter</DeviceName>
                        <DeviceType>physicalDevice</DeviceType>
                        <DynamicReconfigurationConnectorName>U78CB.001.WZS06RG-P1-C3</DynamicReconfigurationConnectorName>
                        <UniqueDeviceID>553713680</UniqueDeviceID>
                    </IOAdapter>
                </RelatedIOAdapter>
            </IOSlot>
        </IOSlots>
        <AssociatedSystemVirtualNetwork>
            <VirtualNetworks>
                <link href="{HMC}/ManagedSystem/{SYS_UUID}/VirtualNetwork/{VNET_UUID}" rel="related"/>
            </VirtualNetworks>
            <VirtualSwitches>
                <link href="{HMC}/ManagedSystem/{SYS_UUID}/VirtualSwitch/{VSWITCH_UUID}" rel="related"/>
            </VirtualSwitches>
        </AssociatedSystemVirtualNetwork>
    </AssociatedSystemIOConfiguration>
    <AssociatedSystemMemoryConfiguration kb="ROO" kxe="false">
        <CurrentAvailableSystemMemory>61440</CurrentAvailableSystemMemory>
        <InstalledSystemMemory>131072</InstalledSystemMemory>
    </AssociatedSystemMemoryConfiguration>
    <AssociatedSystemProcessorConfiguration kb="ROO" kxe="false">
        <CurrentAvailableSystemProcessorUnits>6.45</CurrentAvailableSystemProcessorUnits>
        <InstalledSystemProcessorUnits>20</InstalledSystemProcessorUnits>
    </AssociatedSystemProcessorConfiguration>
    <AssociatedVirtualIOServers kb="CUD" kxe="false">
        <link href="{HMC}/ManagedSystem/{SYS_UUID}/VirtualIOServer/{VIOS_UUID}" rel="related"/>
        <link rel="related"/>
    </AssociatedVirtualIOServers>
    <Hostname>sys01.example.com</Hostname>
    <MachineTypeModelAndSerialNumber kxe="false" kb="ROR">
        <MachineType>8286</MachineType>
        <Model>42A</Model>
        <SerialNumber>21D4A2V</SerialNumber>
    </MachineTypeModelAndSerialNumber>
    <PrimaryIPAddress>10.0.0.21</PrimaryIPAddress>
    <State>operating</State>
    <SystemFirmware>SV860_245</SystemFirmware>
    <SystemName>
        sys01
    </SystemName>
"""


def lpar_content(name: str, partition_id: str, state: str = "running") -> str:
    return f"""
    <AssociatedManagedSystem href="{HMC}/ManagedSystem/{SYS_UUID}" rel="related"/>
    <ClientNetworkAdapters kb="CUR" kxe="false">
        <link href="{HMC}/LogicalPartition/{LPAR1_UUID}/ClientNetworkAdapter/cna-1" rel="related"/>
    </ClientNetworkAdapters>
    <HostEthernetAdapterLogicalPorts>
        <HostEthernetAdapterLogicalPort>
            <AdapterID>23000000</AdapterID>
            <MACAddress>A2C3F1D40002</MACAddress>
            <LogicalPortID>27004001</LogicalPortID>
            <PortState>up</PortState>
            <HEALogicalPortPhysicalLocation>U78CB.001.WZS06RG-P1-C10-T1-S2</HEALogicalPortPhysicalLocation>
        </HostEthernetAdapterLogicalPort>
    </HostEthernetAdapterLogicalPorts>
    <PartitionID>{partition_id}</PartitionID>
    <PartitionMemoryConfiguration>
        <CurrentMemory>8192</CurrentMemory>
    </PartitionMemoryConfiguration>
    <PartitionName>{name}</PartitionName>
    <PartitionProcessorConfiguration>
        <CurrentSharedProcessorConfiguration>
            <AllocatedVirtualProcessors>2</AllocatedVirtualProcessors>
            <CurrentProcessingUnits>0.5</CurrentProcessingUnits>
        </CurrentSharedProcessorConfiguration>
        <HasDedicatedProcessors>false</HasDedicatedProcessors>
    </PartitionProcessorConfiguration>
    <PartitionState>{state}</PartitionState>
    <PartitionType>AIX/Linux</PartitionType>
    <ResourceMonitoringControlState>active</ResourceMonitoringControlState>
    <ResourceMonitoringIPAddress>10.0.0.{partition_id}</ResourceMonitoringIPAddress>
"""


@pytest.fixture
def managed_system_xml():
    """A single ManagedSystem entry response."""
    return '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n' + make_entry(
        "ManagedSystem", MANAGED_SYSTEM_CONTENT
    )


@pytest.fixture
def lpar_entry_xml():
    """A single LogicalPartition entry response."""
    return make_entry(
        "LogicalPartition",
        lpar_content("lpar01", "3"),
        uuid=LPAR1_UUID,
        href=f"{HMC}/ManagedSystem/{SYS_UUID}/LogicalPartition/{LPAR1_UUID}",
    )


@pytest.fixture
def lpar_feed_xml():
    """A feed of two logical partitions and one VIOS."""
    return make_feed(
        make_entry("LogicalPartition", lpar_content("lpar01", "3"), uuid=LPAR1_UUID),
        make_entry("VirtualIOServer", lpar_content("vios01", "1"), uuid=VIOS_UUID),
        make_entry("LogicalPartition", lpar_content("lpar02", "4", state="not activated"), uuid=LPAR2_UUID),
    )


@pytest.fixture
def mixed_feed_xml():
    """A feed with a malformed entry and an entry of an unregistered type."""
    missing_content = f"""<entry>
    <id>no-content</id>
    <link rel="SELF" href="{HMC}/LogicalPartition/no-content"/>
</entry>"""
    return make_feed(
        make_entry("LogicalPartition", lpar_content("lpar01", "3"), uuid=LPAR1_UUID),
        missing_content,
        make_entry("QuantumProcessor", "<Name>qp0</Name>", uuid="unknown-1"),
        make_entry("LogicalPartition", lpar_content("lpar02", "4"), uuid=LPAR2_UUID),
    )
