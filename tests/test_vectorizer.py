import math

import numpy as np
import pytest

from mdrcluster.pipeline.models import NormalizedDocument
from mdrcluster.pipeline.vectorizer import vectorize


def _docs(*token_lists):
    return [NormalizedDocument(str(i), ' '.join(tokens), tuple(tokens)) for i, tokens in enumerate(token_lists)]


class TestVectorize:
    """Test TF-IDF weighting and the vocabulary order."""

    def test_vocabulary_sorted(self):
        matrix = vectorize(_docs(['pump', 'alarm'], ['zero', 'battery', 'alarm']))
        assert matrix.vocabulary == ('alarm', 'battery', 'pump', 'zero')
        assert matrix.shape == (2, 4)
        assert matrix.ids == ('0', '1')

    def test_raw_count_times_natural_log_idf(self):
        matrix = vectorize(_docs(['a', 'b', 'b'], ['a', 'c'], ['c']))
        weights = matrix.weights.toarray()
        # a: df=2, b: df=1, c: df=2 with N=3
        assert weights[0] == pytest.approx([math.log(3 / 2), 2 * math.log(3), 0.0])
        assert weights[1] == pytest.approx([math.log(3 / 2), 0.0, math.log(3 / 2)])
        assert weights[2] == pytest.approx([0.0, 0.0, math.log(3 / 2)])

    def test_term_in_every_document_has_zero_weight(self):
        matrix = vectorize(_docs(['pump', 'alarm'], ['pump']))
        col = matrix.vocabulary.index('pump')
        assert np.all(matrix.weights.toarray()[:, col] == 0)

    def test_weights_non_negative(self):
        matrix = vectorize(_docs(['a', 'b'], ['b', 'c', 'c'], ['d'], []))
        assert matrix.weights.toarray().min() >= 0

    def test_empty_tokens_give_zero_row(self):
        matrix = vectorize(_docs(['pump'], [], ['alarm']))
        assert np.all(matrix.weights.toarray()[1] == 0)

    def test_no_tokens_at_all(self):
        matrix = vectorize(_docs([], [], []))
        assert matrix.vocabulary == ()
        assert matrix.shape == (3, 0)

    def test_identical_token_multisets_identical_vectors(self):
        matrix = vectorize(_docs(['pump', 'alarm', 'pump'], ['alarm', 'pump', 'pump'], ['screen']))
        weights = matrix.weights.toarray()
        assert weights[0] == pytest.approx(weights[1])

    def test_reproducible(self):
        docs = _docs(['pump', 'alarm'], ['battery', 'swell', 'alarm'], ['screen'])
        first = vectorize(docs)
        second = vectorize(docs)
        assert first.vocabulary == second.vocabulary
        assert np.array_equal(first.weights.toarray(), second.weights.toarray())
