import getpass
import logging
import platform
import psutil

from signatures import filler_string

logger = logging.getLogger(__name__)

def get_hardware_id() -> str:
    """
    Best-effort hardware identifier sent with a license login.

    Combines machine name, OS version and logical core count. Two machines
    can share it and it changes on OS upgrades, so the server must treat it
    as advisory, not as a device identity.
    """
    try:
        machine_name = platform.node()
        os_version = f"{platform.system()} {platform.version()}"
        processor_count = str(psutil.cpu_count(logical=True))
        return f"{machine_name}-{os_version}-{processor_count}"
    except Exception as e:
        logger.warning(f"Could not read hardware info: {e}")
        return f"unknown-hwid-{filler_string(8)}"

def get_pc_user() -> str:
    """
    Name of the OS user running the client, for log messages.
    """
    try:
        return getpass.getuser() or "unknown"
    except Exception:
        return "unknown"
