"""Fixed demonstration dataset, shown when a scan fails and fallback is enabled."""

from diskscope.models import ScanResult

MB = 1024**2

DEMO_PAYLOAD = {
    "root": {
        "name": "Demo Directory",
        "path": "/demo",
        "size": 1024 * MB,
        "is_dir": True,
        "children": [
            {
                "name": "Documents",
                "path": "/demo/Documents",
                "size": 512 * MB,
                "is_dir": True,
                "children": [
                    {"name": "large_file.pdf", "path": "/demo/Documents/large_file.pdf", "size": 256 * MB, "is_dir": False},
                    {"name": "photos", "path": "/demo/Documents/photos", "size": 128 * MB, "is_dir": True},
                    {"name": "videos", "path": "/demo/Documents/videos", "size": 128 * MB, "is_dir": True},
                ],
            },
            {
                "name": "Applications",
                "path": "/demo/Applications",
                "size": 256 * MB,
                "is_dir": True,
                "children": [
                    {"name": "Chrome.app", "path": "/demo/Applications/Chrome.app", "size": 128 * MB, "is_dir": False},
                    {"name": "VSCode.app", "path": "/demo/Applications/VSCode.app", "size": 128 * MB, "is_dir": False},
                ],
            },
            {
                "name": "System",
                "path": "/demo/System",
                "size": 256 * MB,
                "is_dir": True,
                "children": [
                    {"name": "Library", "path": "/demo/System/Library", "size": 128 * MB, "is_dir": True},
                    {"name": "Logs", "path": "/demo/System/Logs", "size": 64 * MB, "is_dir": True},
                    {"name": "Cache", "path": "/demo/System/Cache", "size": 64 * MB, "is_dir": True},
                ],
            },
        ],
    },
    "total_size": 1024 * MB,
    "file_count": 150,
    "error_count": 0,
}


def demo_scan_result() -> ScanResult:
    """Build the demonstration ScanResult. Same content on every call."""
    return ScanResult.from_payload(DEMO_PAYLOAD)
