"""
Posterior draw container.

A PosteriorDrawSet is the flattened output of a sampling run: one
equal-length float64 sequence per parameter. When draws come from several
chains concatenated end to end, ``chain_boundaries`` records each chain's
length so convergence checks can split them again.
"""

from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Sequence, Tuple
import numpy as np
from numpy.typing import ArrayLike, NDArray

from bayesglm.errors import DrawSetError


class PosteriorDrawSet:
    """
    Immutable mapping of parameter name to posterior draws.

    Attributes
    ----------
    draws : Mapping[str, NDArray[np.float64]]
        Read-only mapping; each array is 1-D, read-only, length ``n_draws``.
    chain_boundaries : tuple of int, optional
        Lengths of the concatenated chains, summing to ``n_draws``.
    n_draws : int
        Number of draws per parameter.
    """

    def __init__(
        self,
        draws: Mapping[str, ArrayLike],
        chain_boundaries: Optional[Sequence[int]] = None,
    ) -> None:
        """
        Ingest and validate draws.

        Parameters
        ----------
        draws : Mapping[str, array-like]
            Parameter name to 1-D sequence of numeric draws. Input arrays are
            copied, so later changes by the caller are not observed.
        chain_boundaries : sequence of int, optional
            Per-chain lengths if draws are concatenated chains.

        Raises
        ------
        DrawSetError
            If there are no parameters, a sequence is not 1-D, sequences
            differ in length, or chain boundaries do not sum to ``n_draws``.
        """
        if len(draws) == 0:
            raise DrawSetError("PosteriorDrawSet needs at least one parameter")

        frozen = {}
        lengths = {}
        for name, values in draws.items():
            arr = np.array(values, dtype=np.float64)
            if arr.ndim != 1:
                raise DrawSetError(
                    f"Draws for '{name}' must be 1-D. Got shape {arr.shape}"
                )
            arr.setflags(write=False)
            frozen[name] = arr
            lengths[name] = arr.shape[0]

        if len(set(lengths.values())) != 1:
            raise DrawSetError(f"All parameters must have the same number of draws. Got {lengths}")

        self.n_draws: int = next(iter(lengths.values()))
        self._draws = frozen
        self.draws: Mapping[str, NDArray[np.float64]] = MappingProxyType(frozen)

        if chain_boundaries is not None:
            boundaries = tuple(int(b) for b in chain_boundaries)
            if any(b <= 0 for b in boundaries):
                raise DrawSetError(f"Chain lengths must be positive. Got {boundaries}")
            if sum(boundaries) != self.n_draws:
                raise DrawSetError(
                    f"Chain lengths sum to {sum(boundaries)}, expected n_draws={self.n_draws}"
                )
            self.chain_boundaries: Optional[Tuple[int, ...]] = boundaries
        else:
            self.chain_boundaries = None

    @property
    def parameter_names(self) -> Tuple[str, ...]:
        return tuple(self._draws)

    @property
    def n_chains(self) -> int:
        return len(self.chain_boundaries) if self.chain_boundaries else 1

    def __getitem__(self, name: str) -> NDArray[np.float64]:
        try:
            return self._draws[name]
        except KeyError:
            raise KeyError(
                f"No draws for parameter '{name}'. Available: {list(self._draws)}"
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self._draws

    def __iter__(self) -> Iterator[str]:
        return iter(self._draws)

    def __len__(self) -> int:
        return len(self._draws)

    def chains(self, name: str) -> List[NDArray[np.float64]]:
        """
        Split one parameter's draws back into per-chain sequences.

        Without chain boundaries the whole sequence is a single chain.
        """
        values = self[name]
        if self.chain_boundaries is None:
            return [values]
        splits = np.cumsum(self.chain_boundaries)[:-1]
        return np.split(values, splits)

    def __repr__(self) -> str:
        return (
            f"PosteriorDrawSet(parameters={list(self._draws)}, n_draws={self.n_draws}, "
            f"chains={self.n_chains})"
        )
