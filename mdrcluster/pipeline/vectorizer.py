import logging
from typing import Sequence

import numpy as np
from scipy.sparse import csr_matrix
from sklearn.feature_extraction.text import CountVectorizer

from mdrcluster.pipeline.models import NormalizedDocument, TermMatrix


def _pretokenized(tokens):
    return tokens


def term_counts(documents: Sequence[NormalizedDocument]):
    """Raw term counts, columns sorted lexicographically.

    Returns the `(vocabulary, counts)` pair, for a corpus without any token the
    vocabulary is empty and the matrix has zero columns.
    """
    if not any(doc.tokens for doc in documents):
        return (), csr_matrix((len(documents), 0), dtype=np.float64)

    vectorizer = CountVectorizer(analyzer=_pretokenized, lowercase=False, dtype=np.float64)
    counts: csr_matrix = vectorizer.fit_transform([doc.tokens for doc in documents])
    vocabulary = tuple(vectorizer.get_feature_names_out())
    return vocabulary, counts.tocsr()


def vectorize(documents: Sequence[NormalizedDocument]) -> TermMatrix:
    """TF-IDF weights: `tf(d, t) * ln(N / df(t))` with `tf` the raw count.

    Every vocabulary term occurs in at least one document, thus `df >= 1`.
    Terms found in all documents get a weight of `0`.
    """
    n_docs = len(documents)
    vocabulary, counts = term_counts(documents)

    if counts.shape[1]:
        df = np.asarray((counts > 0).sum(axis=0)).ravel()
        idf = np.log(n_docs / df)
        weights = csr_matrix(counts.multiply(idf[np.newaxis, :]))
        weights.sort_indices()
    else:
        weights = counts

    logging.debug(f'vectorized {n_docs} documents with {len(vocabulary)} terms, {weights.nnz} non-zero weights')

    return TermMatrix(
        ids=tuple(doc.id for doc in documents),
        vocabulary=vocabulary,
        weights=weights,
    )
