"""A database client double for the example app."""


class MockDBClient:
    def __init__(self, config):
        self.config = config
        self.connected = True
        self._users = [{"name": "Test 1"}, {"name": "Test 2"}, {"name": "Test 3"}]

    def close(self):
        self.connected = False

    def get_users(self):
        return self._users
