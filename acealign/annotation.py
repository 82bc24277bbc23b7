# License: BSD3

"""
Character spans over document text.

There are two flavours of span in this package and they must not be
confused:

* `Span` is half-open, `[start, end)`, the way Python slices work.
  Tokens, sentences and sections use it.
* `CharSeq` is what annotation files give us: inclusive on both ends,
  `[start, end]`, plus the literal text the annotator saw.

The only way to go from one to the other is `CharSeq.to_span` and
`CharSeq.from_span`.
"""

# pylint: disable=too-few-public-methods


class Span(object):
    """
    What portion of text an object corresponds to, in terms of
    character offsets.

    Offsets sit in between individual characters ::

          h   o   w   d   y
        0   1   2   3   4   5

    So `(0,5)` covers the whole word above, and `(1,2)`
    picks out the letter "o"
    """
    def __init__(self, start, end):
        self.char_start = start
        self.char_end = end

    def __str__(self):
        return '(%d,%d)' % (self.char_start, self.char_end)

    def __repr__(self):
        return 'Span(%d, %d)' % (self.char_start, self.char_end)

    def _tuple(self):
        return (self.char_start, self.char_end)

    def __lt__(self, other):
        return self._tuple() < other._tuple()

    def __eq__(self, other):
        return isinstance(other, Span) and self._tuple() == other._tuple()

    def __ne__(self, other):
        return not self == other

    def __le__(self, other):
        return self < other or self == other

    def __gt__(self, other):
        return other < self

    def __ge__(self, other):
        return other <= self

    def __hash__(self):
        return hash(self._tuple())

    def length(self):
        """
        Return the length of this span
        """
        return self.char_end - self.char_start

    def contains_offset(self, offset):
        """
        True if the character at `offset` falls inside this span
        """
        return self.char_start <= offset < self.char_end

    def encloses(self, other):
        """
        Return True if this span includes the argument

        Note that `x.encloses(x) == True`

        Corner case: `x.encloses(None) == False`
        """
        if other is None:
            return False
        else:
            return\
                self.char_start <= other.char_start and\
                self.char_end >= other.char_end

    @classmethod
    def merge_all(cls, spans):
        """
        Return a span that stretches from the beginning to the end
        of all the spans in the list
        """
        spans = list(spans)
        if len(spans) < 1:
            raise ValueError("must have at least one span")
        big_start = min(x.char_start for x in spans)
        big_end = max(x.char_end for x in spans)
        return Span(big_start, big_end)


class CharSeq(object):
    """
    An annotated stretch of text, as found in annotation files:
    both `char_start` and `char_end` are *included* in the span.

    An empty annotation has `char_end == char_start - 1`.
    """
    def __init__(self, text, start, end):
        if end < start - 1:
            raise ValueError("inverted character sequence [%d, %d]"
                             % (start, end))
        self.text = text
        self.char_start = start
        self.char_end = end

    def __str__(self):
        return '[%d,%d] "%s"' % (self.char_start, self.char_end,
                                 self.text.replace('\n', '\\n'))

    def __repr__(self):
        return 'CharSeq(%r, %d, %d)' % (self.text, self.char_start,
                                       self.char_end)

    def __eq__(self, other):
        return isinstance(other, CharSeq) and\
            (self.text, self.char_start, self.char_end) ==\
            (other.text, other.char_start, other.char_end)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.text, self.char_start, self.char_end))

    def to_span(self):
        """
        The equivalent half-open `Span`
        """
        return Span(self.char_start, self.char_end + 1)

    @classmethod
    def from_span(cls, span, text):
        """
        Inverse of `to_span`: the inclusive sequence for a half-open
        span, with the given literal text
        """
        return cls(text, span.char_start, span.char_end - 1)


def unescape_amp(text):
    """
    Replace the `&amp;` entity with a plain ampersand.

    Annotation files store ampersands unescaped whereas the source
    documents keep the entity, so this is not a real difference.
    """
    return text.replace('&amp;', '&')
