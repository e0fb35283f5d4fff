def skipped():
    return None
