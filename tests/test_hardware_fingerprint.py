"""
Unit tests for the best-effort hardware identifier.
"""
from unittest.mock import patch

from hardware_fingerprint import get_hardware_id, get_pc_user


class TestHardwareId:
    def test_combines_machine_os_and_cores(self):
        with patch("hardware_fingerprint.platform.node", return_value="box"), patch(
            "hardware_fingerprint.platform.system", return_value="Linux"
        ), patch("hardware_fingerprint.platform.version", return_value="6.1"), patch(
            "hardware_fingerprint.psutil.cpu_count", return_value=8
        ):
            assert get_hardware_id() == "box-Linux 6.1-8"

    def test_stable_across_calls(self):
        assert get_hardware_id() == get_hardware_id()

    def test_falls_back_when_unreadable(self):
        with patch("hardware_fingerprint.platform.node", side_effect=OSError("no hostname")):
            hardware_id = get_hardware_id()

        assert hardware_id.startswith("unknown-hwid-")
        assert len(hardware_id) == len("unknown-hwid-") + 8

    def test_pc_user_fallback(self):
        with patch("hardware_fingerprint.getpass.getuser", side_effect=KeyError("uid")):
            assert get_pc_user() == "unknown"
