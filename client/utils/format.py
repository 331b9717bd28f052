_UNITS = ['Bytes', 'KB', 'MB', 'GB', 'TB']


def format_file_size(num_bytes: int) -> str:
    if not num_bytes:
        return "0 Bytes"
    value = float(num_bytes)
    i = 0
    while value >= 1024 and i < len(_UNITS) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g} {_UNITS[i]}"
