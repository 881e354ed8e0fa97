from pericope.core.normalizer import NormalizationConfig, Normalizer


def test_normalizer_maps_dashes_and_quotes() -> None:
    n = Normalizer(NormalizationConfig())
    assert n.normalize("Psalm 37:3\u20137a, 23\u201424, hos 1\u201c4\u22129\u201d") == 'Psalm 37:3-7a, 23-24, hos 1"4-9"'


def test_normalizer_preserves_offsets() -> None:
    n = Normalizer()
    text = "John 20:19\u201323 \u201cPeace be unto you\u201d"
    out = n.normalize(text)
    assert len(out) == len(text)
    assert out.index("Peace") == text.index("Peace")


def test_normalizer_config_switches() -> None:
    n = Normalizer(NormalizationConfig(standardize_quotes=False))
    assert n.normalize("1\u201c4\u20139") == "1\u201c4-9"
    n = Normalizer(NormalizationConfig(standardize_dashes=False))
    assert n.normalize("1\u201c4\u20139") == '1"4\u20139'
