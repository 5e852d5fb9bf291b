"""
Serialization — бинарный поток dual-чисел

Формат: вещественная часть, сразу за ней производная, каждая в нативном
бинарном представлении вида скаляра (нативный порядок байт):

    float64   → 8 + 8 байт
    float32   → 4 + 4 байта
    int       → int64 + int64
    Fraction  → (числитель, знаменатель) int64 для каждой компоненты

Ни версии, ни длины, ни согласования порядка байт: этим владеет канал
ввода-вывода. Читающая сторона должна знать вид скаляра заранее.
"""

import logging
from fractions import Fraction
from typing import BinaryIO, Final

import numpy as np

from src.core.math.scalars import scalar_type_name
from src.dual.dual_number import Dual

logger = logging.getLogger(__name__)

# вид скаляра → (dtype одного слова, слов на компоненту)
_LAYOUT: Final[dict[type, tuple[np.dtype, int]]] = {
    int: (np.dtype(np.int64), 1),
    Fraction: (np.dtype(np.int64), 2),
    np.float32: (np.dtype(np.float32), 1),
    np.float64: (np.dtype(np.float64), 1),
}


def _layout(scalar_type: type) -> tuple[np.dtype, int]:
    try:
        return _LAYOUT[scalar_type]
    except KeyError:
        raise ValueError(f"no binary layout for scalar type {scalar_type!r}") from None


def encoded_size(scalar_type: type) -> int:
    """Размер закодированного Dual в байтах."""
    dtype, words = _layout(scalar_type)
    return 2 * words * dtype.itemsize


def encode_dual(z: Dual) -> bytes:
    """
    Байты Dual: re, затем du.

    Raises:
        OverflowError: Если int или компонента Fraction не помещается в int64
    """
    dtype, _ = _layout(z.scalar_type)
    if z.scalar_type is Fraction:
        words = [z.re.numerator, z.re.denominator, z.du.numerator, z.du.denominator]
    else:
        words = [z.re, z.du]
    return np.array(words, dtype=dtype).tobytes()


def decode_dual(data: bytes, scalar_type: type) -> Dual:
    """
    Dual из байтов encode_dual.

    Raises:
        ValueError: Если длина данных не совпадает с encoded_size
    """
    expected = encoded_size(scalar_type)
    if len(data) != expected:
        raise ValueError(
            f"expected {expected} bytes for a {scalar_type_name(scalar_type)} dual, got {len(data)}"
        )
    dtype, _ = _layout(scalar_type)
    words = np.frombuffer(data, dtype=dtype)
    if scalar_type is Fraction:
        re = Fraction(int(words[0]), int(words[1]))
        du = Fraction(int(words[2]), int(words[3]))
    elif scalar_type is int:
        re, du = int(words[0]), int(words[1])
    else:
        re, du = words[0], words[1]
    return Dual.of(scalar_type, re, du)


def dump_dual(stream: BinaryIO, z: Dual) -> int:
    """Запись Dual в бинарный поток. Возвращает число записанных байт."""
    data = encode_dual(z)
    stream.write(data)
    logger.debug("Wrote %d bytes for %s dual", len(data), scalar_type_name(z.scalar_type))
    return len(data)


def load_dual(stream: BinaryIO, scalar_type: type) -> Dual:
    """
    Чтение одного Dual заданного вида из бинарного потока.

    Raises:
        EOFError: Если поток закончился раньше, чем прочитан весь Dual
    """
    size = encoded_size(scalar_type)
    data = stream.read(size)
    if len(data) < size:
        raise EOFError(
            f"unexpected end of stream: needed {size} bytes, got {len(data)}"
        )
    return decode_dual(data, scalar_type)
