import time
import threading
from datetime import datetime, timezone
from typing import Callable, List, NamedTuple

from flakeid.errors import ClockMovedBackwardsError, ConfigError
from flakeid.logging import info, warning


"""
雪花算法（全局唯一id）

# Twitter's Snowflake algorithm implementation which is used to generate distributed IDs.

# 0 - 41 bits timestamp - 5 bits datacenter id - 5 bits worker id - 12 bits sequence

# https://github.com/twitter-archive/snowflake/blob/snowflake-2010/src/main/scala/com/twitter/service/snowflake/IdWorker.scala
"""

# 起始时间 2020-01-01 00:00:00 (UTC+8)，有效期69年
EPOCH = 1577808000000

WORKER_ID_BITS = 5
DATACENTER_ID_BITS = 5
SEQUENCE_BITS = 12
TIMESTAMP_BITS = 41

# bit 63 stays 0
ID_BITS = 63


def time_gen() -> int:
    return time.time_ns() // 1_000_000


class SnowflakeId(NamedTuple):
    timestamp: int
    datacenter_id: int
    worker_id: int
    sequence: int

    @property
    def datetime(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)


def _max_value(bits: int) -> int:
    return -1 ^ (-1 << bits)


def _check_bits(worker_id_bits, datacenter_id_bits, sequence_bits):
    for name, bits in (
        ("worker_id_bits", worker_id_bits),
        ("datacenter_id_bits", datacenter_id_bits),
        ("sequence_bits", sequence_bits),
    ):
        if not isinstance(bits, int) or isinstance(bits, bool) or bits < 0:
            raise ConfigError(f"{name} must be a non-negative integer")
    if sequence_bits == 0:
        raise ConfigError("sequence_bits must be greater than 0")
    total = worker_id_bits + datacenter_id_bits + sequence_bits
    if total != ID_BITS - TIMESTAMP_BITS:
        raise ConfigError(
            f"worker, datacenter and sequence bits must sum to {ID_BITS - TIMESTAMP_BITS}, got {total}"
        )


def _check_id(name, value, max_value):
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer between 0 and {max_value}")
    if value > max_value or value < 0:
        raise ConfigError(f"{name} must be between 0 and {max_value}")


def _check_epoch(epoch, now):
    if not isinstance(epoch, int) or isinstance(epoch, bool):
        raise ConfigError(f"epoch must be an integer number of milliseconds, got {epoch!r}")
    if epoch < 0 or epoch > now:
        raise ConfigError(f"epoch must be between 0 and the current time {now}")
    if now - epoch >= 1 << TIMESTAMP_BITS:
        raise ConfigError(f"epoch is too old, timestamps must fit in {TIMESTAMP_BITS} bits")


def parse_id(
    id: int,
    *,
    epoch: int = EPOCH,
    worker_id_bits: int = WORKER_ID_BITS,
    datacenter_id_bits: int = DATACENTER_ID_BITS,
    sequence_bits: int = SEQUENCE_BITS,
) -> SnowflakeId:
    """
    Split an id back into its parts.

    :param id: an id issued by an IdWorker with the same epoch and bit widths
    :return: SnowflakeId, timestamp is absolute milliseconds since the Unix epoch
    """
    if not isinstance(id, int) or isinstance(id, bool) or id < 0 or id >> ID_BITS:
        raise ValueError(f"{id!r} is not a valid snowflake id")
    _check_bits(worker_id_bits, datacenter_id_bits, sequence_bits)

    worker_id_shift = sequence_bits
    datacenter_id_shift = sequence_bits + worker_id_bits
    timestamp_left_shift = sequence_bits + worker_id_bits + datacenter_id_bits

    return SnowflakeId(
        timestamp=(id >> timestamp_left_shift) + epoch,
        datacenter_id=(id >> datacenter_id_shift) & _max_value(datacenter_id_bits),
        worker_id=(id >> worker_id_shift) & _max_value(worker_id_bits),
        sequence=id & _max_value(sequence_bits),
    )


class IdWorker:
    def __init__(
        self,
        worker_id: int,
        datacenter_id: int,
        *,
        epoch: int = EPOCH,
        worker_id_bits: int = WORKER_ID_BITS,
        datacenter_id_bits: int = DATACENTER_ID_BITS,
        sequence_bits: int = SEQUENCE_BITS,
        time_func: Callable[[], int] = time_gen,
    ):
        # 位移值
        _check_bits(worker_id_bits, datacenter_id_bits, sequence_bits)
        self.worker_id_bits = worker_id_bits
        self.datacenter_id_bits = datacenter_id_bits
        self.sequence_bits = sequence_bits

        self.max_worker_id = _max_value(worker_id_bits)
        self.max_datacenter_id = _max_value(datacenter_id_bits)

        # 参数校验
        _check_id("worker_id", worker_id, self.max_worker_id)
        _check_id("datacenter_id", datacenter_id, self.max_datacenter_id)
        _check_epoch(epoch, time_func())

        self._worker_id = worker_id
        self._datacenter_id = datacenter_id
        self.epoch = epoch
        self._time_gen = time_func

        self.worker_id_shift = sequence_bits
        self.datacenter_id_shift = sequence_bits + worker_id_bits
        self.timestamp_left_shift = sequence_bits + worker_id_bits + datacenter_id_bits
        self.sequence_mask = _max_value(sequence_bits)

        self.sequence = 0
        self.last_timestamp = 0
        self.lock = threading.Lock()

        info(
            "worker starting. timestamp left shift %d, datacenter id bits %d, "
            "worker id bits %d, sequence bits %d, workerid %d",
            self.timestamp_left_shift,
            datacenter_id_bits,
            worker_id_bits,
            sequence_bits,
            worker_id,
        )

    @property
    def worker_id(self) -> int:
        return self._worker_id

    @property
    def datacenter_id(self) -> int:
        return self._datacenter_id

    def __repr__(self):
        return f"<IdWorker datacenter_id={self._datacenter_id} worker_id={self._worker_id}>"

    def _til_next_millis(self, last_timestamp: int) -> int:
        # 阻塞到下一个毫秒
        timestamp = self._time_gen()
        while timestamp <= last_timestamp:
            timestamp = self._time_gen()
        return timestamp

    def _next_id(self) -> int:
        timestamp = self._time_gen()

        if timestamp < self.last_timestamp:
            drift = self.last_timestamp - timestamp
            warning(
                "clock is moving backwards. Rejecting requests until %d.",
                self.last_timestamp,
            )
            raise ClockMovedBackwardsError(drift, self.last_timestamp)

        if self.last_timestamp == timestamp:
            self.sequence = (self.sequence + 1) & self.sequence_mask
            if self.sequence == 0:
                timestamp = self._til_next_millis(self.last_timestamp)
        else:
            self.sequence = 0

        self.last_timestamp = timestamp

        return (
            ((timestamp - self.epoch) << self.timestamp_left_shift)
            | (self._datacenter_id << self.datacenter_id_shift)
            | (self._worker_id << self.worker_id_shift)
            | self.sequence
        )

    def next_id(self) -> int:
        with self.lock:
            return self._next_id()

    def next_ids(self, count: int) -> List[int]:
        if count < 0:
            raise ValueError("count must not be negative")
        with self.lock:
            return [self._next_id() for _ in range(count)]

    def parse(self, id: int) -> SnowflakeId:
        return parse_id(
            id,
            epoch=self.epoch,
            worker_id_bits=self.worker_id_bits,
            datacenter_id_bits=self.datacenter_id_bits,
            sequence_bits=self.sequence_bits,
        )


# eg:
# worker = IdWorker(worker_id=1, datacenter_id=1)
# print(worker.next_id())
