# -*- coding: utf-8 -*-
"""测试用的内存版 Redis，只实现业务代码用到的命令。"""
import json
import time


class FakeRedis:
    def __init__(self):
        self._data = {}
        self._expires = {}
        self.published = []

    def _purge(self, key):
        exp = self._expires.get(key)
        if exp is not None and exp <= time.time():
            self._data.pop(key, None)
            self._expires.pop(key, None)

    def get(self, key):
        self._purge(key)
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = str(value)
        self._expires.pop(key, None)
        return True

    def setex(self, key, seconds, value):
        self._data[key] = str(value)
        self._expires[key] = time.time() + int(seconds)
        return True

    def incr(self, key):
        self._purge(key)
        value = int(self._data.get(key, 0)) + 1
        self._data[key] = str(value)
        return value

    def expire(self, key, seconds):
        if key not in self._data:
            return False
        self._expires[key] = time.time() + int(seconds)
        return True

    def ttl(self, key):
        self._purge(key)
        if key not in self._data:
            return -2
        exp = self._expires.get(key)
        if exp is None:
            return -1
        return max(int(exp - time.time()), 0)

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self._data.pop(key, None) is not None:
                removed += 1
            self._expires.pop(key, None)
        return removed

    def exists(self, key):
        self._purge(key)
        return int(key in self._data)

    def publish(self, channel, message):
        self.published.append((channel, message))
        return 1

    def channel_messages(self, channel):
        return [json.loads(m) for c, m in self.published if c == channel]
