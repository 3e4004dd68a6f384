from resolvent import schema as S


@S.read(name="notDiscovered")
def not_discovered() -> str:
    return ""
