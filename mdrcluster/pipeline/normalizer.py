import logging
import re
from typing import Iterable, List

import nltk
from nltk.corpus import stopwords
from nltk.stem.snowball import SnowballStemmer

from mdrcluster.pipeline.models import Document, NormalizedDocument


def ensure_nltk_resources() -> None:
    try:
        nltk.data.find('corpora/stopwords')
    except LookupError:
        logging.info('downloading nltk stopwords corpus')
        nltk.download('stopwords', quiet=True)


ensure_nltk_resources()
# the snowball english list, function words only
STOP_WORDS = frozenset(stopwords.words('english'))

_digits_re = re.compile(r'\d+')
# any symbol which is neither a word character nor whitespace
_punctuation_re = re.compile(r'[^\w\s]|_')


def clean_text(text: str) -> str:
    """Removes numbers and punctuation and lowercases, in this order.

    Punctuation is deleted, not replaced, so `cross-threaded` becomes `crossthreaded`.
    """
    text = _digits_re.sub('', text or '')
    text = _punctuation_re.sub('', text)
    return text.lower()


def tokenize(text: str, stemmer: SnowballStemmer) -> List[str]:
    # `split()` also collapses any run of whitespace
    tokens = []
    for word in clean_text(text).split():
        if word in STOP_WORDS:
            continue
        stem = stemmer.stem(word)
        if stem:
            tokens.append(stem)
    return tokens


def normalize_documents(documents: Iterable[Document]) -> List[NormalizedDocument]:
    """Turns raw texts into stemmed token sequences, keeping the input order.

    Documents which end up without any token are kept with an empty sequence.
    """
    # a new stemmer per run, the snowball stemmer keeps no state between words
    stemmer = SnowballStemmer('english')
    return [
        NormalizedDocument(doc.id, doc.raw_text, tuple(tokenize(doc.raw_text, stemmer)))
        for doc in documents
    ]
