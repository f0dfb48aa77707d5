from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

import numpy as np
from scipy.sparse import csr_matrix


@dataclass(frozen=True)
class Document:
    id: str
    raw_text: str


@dataclass(frozen=True)
class NormalizedDocument:
    id: str
    raw_text: str
    # may be empty, e.g. for texts made only of digits and punctuation
    tokens: Tuple[str, ...]


@dataclass(frozen=True)
class TermMatrix:
    """TF-IDF weighted vectors, one row per document in corpus order.

    Columns follow ``vocabulary``, which is sorted lexicographically so that
    identical input always yields the identical matrix.
    """
    ids: Tuple[str, ...]
    vocabulary: Tuple[str, ...]
    weights: csr_matrix

    @property
    def shape(self) -> Tuple[int, int]:
        return self.weights.shape


@dataclass(frozen=True)
class DensityClustering:
    # `0` is noise, positive ids are clusters in discovery order
    labels: np.ndarray
    core_mask: np.ndarray
    eps: Union[float, None]
    min_pts: int

    @property
    def cluster_count(self) -> int:
        return int(self.labels.max()) if len(self.labels) else 0


@dataclass(frozen=True)
class ClusterSummary:
    rank: int
    cluster_id: int
    size: int


@dataclass(frozen=True)
class RankedResult:
    id: str
    raw_text: str
    rank: int
    x: float
    y: float


@dataclass
class PipelineResult:
    document_count: int
    cluster_count: int
    noise_count: int = 0
    eps: Union[float, None] = None
    clusters: List[ClusterSummary] = field(default_factory=list)
    events: List[RankedResult] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'document_count': self.document_count,
            'cluster_count': self.cluster_count,
            'noise_count': self.noise_count,
            'eps': self.eps,
            'clusters': [
                {'rank': c.rank, 'cluster_id': c.cluster_id, 'size': c.size}
                for c in self.clusters
            ],
            'events': [
                {'id': e.id, 'text': e.raw_text, 'cluster': e.rank, 'x': e.x, 'y': e.y}
                for e in self.events
            ],
        }


DocumentInput = Union[Document, Tuple[str, str], Mapping[str, str]]


def documents_from_pairs(pairs: Iterable[DocumentInput]) -> List[Document]:
    """Builds the corpus from `(id, text)` pairs, `{'id', 'text'}` mappings or documents.

    Ids must be unique, the order of the input is kept.
    """
    documents = []
    seen = set()
    for pair in pairs:
        if isinstance(pair, Document):
            doc = Document(pair.id, pair.raw_text or '')
        elif isinstance(pair, Mapping):
            doc = Document(str(pair['id']), pair.get('text') or '')
        else:
            doc_id, text = pair
            doc = Document(str(doc_id), text or '')

        if doc.id in seen:
            raise ValueError(f'duplicate document id: {doc.id}')
        seen.add(doc.id)
        documents.append(doc)
    return documents
