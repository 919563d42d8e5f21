import numpy as np

from mp_psi.errors import ConfigurationError


class BitVector:
    """
    Вектор-индикатор фиксированной длины: бит i равен 1, если у стороны
    есть элемент, попавший в корзину i. Неизменяемый.
    """

    __slots__ = ("_bits",)

    def __init__(self, bits):
        if isinstance(bits, BitVector):
            self._bits = bits._bits
            return
        if isinstance(bits, str):
            bits = self._parse(bits)

        values = []
        for bit in bits:
            if bit not in (0, 1):
                raise ConfigurationError(f"Недопустимое значение бита: {bit!r}")
            values.append(int(bit))
        if not values:
            raise ConfigurationError("Вектор должен содержать хотя бы одну корзину")
        self._bits = tuple(values)

    @staticmethod
    def _parse(text):
        text = text.strip()
        if not text or set(text) - {"0", "1"}:
            raise ConfigurationError(f"Строка не является битовым вектором: {text!r}")
        return [int(ch) for ch in text]

    @classmethod
    def from_string(cls, text: str) -> "BitVector":
        return cls(cls._parse(text))

    @classmethod
    def zeros(cls, length: int) -> "BitVector":
        if length < 1:
            raise ConfigurationError("Длина вектора должна быть положительной")
        return cls([0] * length)

    def __len__(self):
        return len(self._bits)

    def __iter__(self):
        return iter(self._bits)

    def __getitem__(self, index):
        return self._bits[index]

    def __eq__(self, other):
        if isinstance(other, BitVector):
            return self._bits == other._bits
        return NotImplemented

    def __hash__(self):
        return hash(self._bits)

    def __and__(self, other):
        other = BitVector(other)
        if len(other) != len(self):
            raise ConfigurationError(
                f"Длины векторов не совпадают: {len(self)} != {len(other)}"
            )
        return BitVector(a & b for a, b in zip(self._bits, other._bits))

    def __repr__(self):
        return f"BitVector('{self.to_string()}')"

    def __str__(self):
        return self.to_string()

    def count(self) -> int:
        """Число установленных битов"""
        return sum(self._bits)

    def indices(self) -> list[int]:
        return [i for i, bit in enumerate(self._bits) if bit]

    def to_list(self) -> list[int]:
        return list(self._bits)

    def to_numpy(self) -> np.ndarray:
        return np.array(self._bits, dtype=np.uint8)

    def to_string(self) -> str:
        return "".join(map(str, self._bits))
