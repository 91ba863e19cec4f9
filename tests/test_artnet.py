import asyncio

import pytest

from parlight.services.artnet import ArtNetService


class RecorderSocket:
    def __init__(self):
        self.sent = []
        self.closed = False

    def sendto(self, data, address):
        self.sent.append((bytes(data), address))

    def close(self):
        self.closed = True


class FailingSocket(RecorderSocket):
    def sendto(self, data, address):
        raise OSError("network unreachable")


def make_service(**kwargs):
    service = ArtNetService(host="10.0.0.5", **kwargs)
    service.sock.close()
    service.sock = RecorderSocket()
    return service


def test_write_and_read_clamp_values():
    service = make_service()
    service.write({1: 300, 2: -3, 512: 7})
    assert service.read(1) == 255
    assert service.read(2) == 0
    assert service.read(512) == 7


def test_out_of_range_channels_ignored_on_write_and_rejected_on_read():
    service = make_service()
    service.write({0: 10, 513: 10})
    assert bytes(service.dmx_universe) == bytes(512)
    with pytest.raises(IndexError):
        service.read(0)
    with pytest.raises(IndexError):
        service.read(513)


def test_build_packet_layout():
    service = make_service(universe=3)
    service.write({1: 0xAB, 512: 0xCD})
    packet = service.build_packet()

    assert len(packet) == 18 + 512
    assert packet[:8] == b"Art-Net\x00"
    assert packet[8:10] == b"\x00\x50"
    assert packet[10:12] == b"\x00\x0e"
    assert packet[14:16] == b"\x03\x00"
    assert packet[16:18] == b"\x02\x00"
    assert packet[18] == 0xAB
    assert packet[-1] == 0xCD


@pytest.mark.asyncio
async def test_blackout_sends_one_dark_frame():
    service = make_service(port=6455)
    service.write({1: 255, 2: 128})
    await service.blackout()

    assert bytes(service.dmx_universe) == bytes(512)
    assert len(service.sock.sent) == 1
    packet, address = service.sock.sent[0]
    assert address == ("10.0.0.5", 6455)
    assert packet[18:] == bytes(512)


@pytest.mark.asyncio
async def test_send_errors_are_logged_not_raised(caplog):
    service = make_service()
    service.sock = FailingSocket()
    await service.send_artnet()
    assert "Art-Net send error" in caplog.text


@pytest.mark.asyncio
async def test_send_loop_streams_frames_until_stopped():
    service = make_service(fps=100)
    await service.start()
    service.write({5: 42})
    await asyncio.sleep(0.1)
    await service.stop()

    sent = len(service.sock.sent)
    assert sent >= 2
    assert service.sock.closed
    assert any(packet[18 + 4] == 42 for packet, _ in service.sock.sent)
    await asyncio.sleep(0.05)
    assert len(service.sock.sent) == sent


@pytest.mark.asyncio
async def test_debug_dump_to_file(tmp_path):
    debug_file = tmp_path / "logs" / "artnet.log"
    service = make_service(debug=True, debug_file=str(debug_file))
    service.write({1: 0x10, 3: 0xFF})
    await service.send_artnet()

    line = debug_file.read_text(encoding="utf-8").strip()
    assert "artnet dmx 10.00.FF" in line


@pytest.mark.asyncio
async def test_debug_dump_to_log(caplog):
    caplog.set_level("DEBUG", logger="parlight.services.artnet")
    service = make_service(debug=True)
    service.write({2: 0x7F})
    await service.send_artnet()

    assert "artnet dmx 00.7F.00" in caplog.text
    assert len(service.sock.sent) == 1
