"""
Name-spaces for members. A declaration's members live in one flat layer,
keyed by name, in first-declared order.
"""

from typing import Generic, Iterable, Optional, TypeVar

T = TypeVar('T')

class AlreadyExists(KeyError): pass

class Layer(Generic[T]):
	""" Lightly enhanced dictionary: It does not like duplicate keys, unless you insist. """
	_symbol: dict[str, T]

	def __init__(self):
		self._symbol = {}

	def __contains__(self, key: str) -> bool:
		return key in self._symbol

	def __len__(self): return len(self._symbol)

	def symbol(self, key: str) -> Optional[T]:
		return self._symbol.get(key)

	def mount(self, key:str, symbol:T) -> T:
		if key in self._symbol:
			raise AlreadyExists(key)
		self._symbol[key] = symbol
		return symbol

	def replace(self, key:str, symbol:T) -> T:
		# Later definitions win, but keep the earlier position.
		self._symbol[key] = symbol
		return symbol

	def each_symbol(self) -> Iterable[T]:
		return self._symbol.values()
