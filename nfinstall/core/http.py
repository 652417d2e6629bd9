# nfinstall/core/http.py
import requests
from requests.adapters import HTTPAdapter, Retry

UA = "nfinstall/0.1"

def make_session() -> requests.Session:
    # One attempt per action: no retries, no status-based replays.
    retries = Retry(total=0, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=retries, pool_connections=4, pool_maxsize=4)
    s = requests.Session()
    s.mount("http://", adapter); s.mount("https://", adapter)
    s.headers.update({"User-Agent": UA})
    return s

SESSION = make_session()
