class SetupError(Exception):
    """프로비저닝 실행을 중단시키는 오류의 공통 부모."""


class SchemaNotFoundError(SetupError):
    def __init__(self, path):
        super().__init__(f"schema file not found: {path}")
        self.path = path


class ConnectivityError(SetupError):
    """DB 에 연결/인증할 수 없음. 어떤 쓰기도 시도되지 않은 상태."""


class SchemaDecodeError(SetupError):
    def __init__(self, path, reason):
        super().__init__(f"schema file is not valid UTF-8: {path} ({reason})")
        self.path = path
