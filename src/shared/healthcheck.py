import os
import requests
import sys
from typing import List, Optional, Tuple

def check_http_service(name: str, url: str) -> Tuple[bool, str]:
    try:
        response = requests.get(url, timeout=5)
        if response.status_code == 200:
            return True, f"{name} is healthy"
        return False, f"{name} returned status code {response.status_code}"
    except requests.RequestException as e:
        return False, f"{name} check failed: {str(e)}"

def check_services() -> List[Tuple[str, Optional[bool], str]]:
    # Allow overriding via environment variables. Defaults match the service defaults.
    services = {
        "Upload Service": os.getenv("UPLOAD_SERVICE_HEALTH", "http://localhost:8080/health"),
        "Uploaded Files": os.getenv("UPLOADED_FILES_HEALTH", ""),
    }

    results = []
    for name, url in services.items():
        if not url:
            results.append((name, None, "No address configured (skipped)"))
            continue
        if url.startswith("http://") or url.startswith("https://"):
            healthy, message = check_http_service(name, url)
        else:
            healthy, message = False, "Unsupported check type"
        results.append((name, healthy, message))

    return results

def main():
    print("Running health checks...")
    results = check_services()

    all_healthy = True
    for name, healthy, message in results:
        if healthy is None:
            print(f"S {name}: {message}")
            continue
        status = "✓" if healthy else "✗"
        print(f"{status} {name}: {message}")
        if healthy is False:
            all_healthy = False

    sys.exit(0 if all_healthy else 1)

if __name__ == "__main__":
    main()
