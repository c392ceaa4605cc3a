# satnetstack

An onboard network stack for a swarm of nanosatellites. It gives the
processes running on a satellite one place to send and receive packets,
drops traffic from senders outside the node's radio range, relays UDP
datagrams between the network and the local stack address, and provides
the hello exchange of the OLSR routing protocol so that a node learns its
one-hop neighbours.

Only the standard library is needed.

## Installing

```
pip install .
```

The tests need pytest:

```
pip install .[test]
pytest
```

## Running a node

```
satnetstack
satnetstack --source-ip 10.0.0.1 --port 1698
```

The command starts a `Forwarder` on the given UDP port (default 1698) in a
background thread, creates an `Iru` for the node's own address (default
`10.0.0.1`), and then waits until interrupted with Ctrl-C. It returns 1 if
the forwarder or the router unit cannot be set up.

## Modules

- `satnetstack.model` – the shared data types: `Packet` (source,
  destination and next-hop `IPv4Address`, `proto`, `dest_port`, `payload`
  and the derived `payload_len`), `Position` with `distance_to`, and the
  `ConnType` enum (`UDP`, `TCP`).
- `satnetstack.iru` – `Iru`, the internal router unit.
  - `register_process()` returns a new process id.
  - `send(packet)` sets the next hop (currently the destination itself),
    fills in the source address if it is unset, and sends the packet over
    UDP.
  - `recv(proc_id, port, conn_type=ConnType.UDP, timeout=None)` binds a UDP
    socket on `port` and blocks until one packet arrives for the process;
    it raises `TimeoutError` when `timeout` runs out.
  - `handle_datagram(proc_id, port, data)` decodes a received datagram,
    drops it if it is malformed, out of range or sent by this node itself,
    and otherwise hands it to the waiting listener.
  - `close()` stops receivers and closes the sending socket; an `Iru` is
    also a context manager.
  - Failures raise `IruError`.
- `satnetstack.proc_queue` – `ProcQueue`, the registry of `Process`
  objects and the `Listener` objects that wait on their ports
  (`Listener.deliver` and `Listener.wait`). Missing processes or listeners
  raise `ProcQueueError`.
- `satnetstack.udp_comm` – `serialize_packet` and `deserialize_packet` for
  the wire format (three 4-byte addresses, protocol, port and a 64-bit
  payload length, then the payload), plus `open_receiver`, `open_sender`
  and `send_packet` for broadcast-capable UDP sockets. Malformed data
  raises `PacketFormatError`.
- `satnetstack.pos` and `satnetstack.filter` – `filter_packet` returns a
  packet only if its sender's position (`get_position`) is within range of
  this node (`is_in_range`, `receiver_position`, `get_range`).
- `satnetstack.forwarder` – `Forwarder` relays datagrams received on a
  port: those coming from the stack address (`192.168.1.2`) are broadcast
  to `10.0.0.255`, everything else is sent to the stack address. `route`
  gives the destination for a sender, `handle` forwards one datagram,
  `start` runs `serve_forever` in a background thread.
  `init_forwarder(port, conn_type)` starts one; only UDP is accepted.
- `satnetstack.addressing` – `parse_ip4`, `prefixlen_to_mask` and
  `interface_config`, which builds an `InterfaceConfig` (address, netmask,
  gateway `192.168.1.1`, and the derived `network`). Bad input raises
  `BadAddressError` or `BadMaskError`, both `NetifError`s.
- `satnetstack.hello` – `HelloMessage` (`to_bytes`, `from_bytes`),
  `Willingness`, `OneHopNeighbor`, `TwoHopNeighbors` and `HelloService`,
  which broadcasts a hello every 5 seconds on port 1698 (`send_once`,
  `build_message`) and records each sender in the one-hop neighbour table
  (`handle_packet`). `start` and `stop` run and end its two threads.
- `satnetstack.olsr` – `OlsrNode`, which owns the neighbour tables and MPR
  lists, registers with an `Iru` and runs a `HelloService` (`start`,
  `stop`).
- `satnetstack.table` and `satnetstack.synclist` – `Table` (integer keys)
  and `SyncList`, the thread-safe containers used by the routing code.
  Values are copied when stored.

## Example

```python
import ipaddress
from satnetstack.model import ConnType, Packet
from satnetstack.udp_comm import serialize_packet, deserialize_packet

packet = Packet(
    src_addr=ipaddress.IPv4Address("10.0.0.1"),
    dest_addr=ipaddress.IPv4Address("10.0.0.255"),
    next_hop_addr=ipaddress.IPv4Address("10.0.0.255"),
    proto=ConnType.UDP,
    dest_port=1698,
    payload=b"hello",
)
assert deserialize_packet(serialize_packet(packet)) == packet
```

## What it does not do

- It does not bring up a virtual network interface or run its own IP
  stack. `Iru` only checks the interface settings with `interface_config`;
  all traffic goes through the operating system's UDP sockets.
- TCP is not supported: `Iru.recv` and `init_forwarder` raise for
  `ConnType.TCP`.
- Routing is direct: the next hop is always the destination.
- Positions are fixed at the origin and the range is 10, so every sender
  with an address passes the filter.
- OLSR covers only the hello exchange. Two-hop neighbours, MPR selection
  and topology control messages are not computed or sent, and the
  `satnetstack` command does not start an `OlsrNode`.