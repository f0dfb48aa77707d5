from datetime import datetime, timezone


def now_iso(micros: bool = True):
    return datetime.now(timezone.utc).strftime(f'%Y-%m-%d %H:%M:%S{".%f" if micros else ""}+0000')
