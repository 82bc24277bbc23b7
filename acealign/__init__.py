"""
The acealign library turns span annotated documents into token aligned
annotation graphs. It has a three-layer structure:

* base layer (spans, documents, alignment, graph assembly)
* tool layer (tokenizers and other external tools)
* project layer (specific to particular corpora, currently ACE)

Layers
~~~~~~
Working our way up the tower, the base layer provides:

* spans (acealign.annotation): half-open character spans, and the
  inclusive character sequences annotation files give us

* documents (acealign.document): text, sections and the sentences
  and tokenizations placed inside them (acealign.placement)

* alignment (acealign.align): from annotated character sequences to
  ranges of tokens within a single sentence

* graph (acealign.assembly): entities, events, their mentions and
  arguments, cross-referenced and aligned with tokens; along with a
  text consistency check (acealign.checks) and XML output
  (acealign.output)

The tool layer (`acealign.external`) is where tokens come from.

On top of this, the project layer (`acealign.ace`) keeps track of
the conventions of the ACE corpus: file layout, annotation and source
document formats ::

                  ace                    [project layer]
                   |
        +----------+---------+
        |          |         |
        |          v         |
        |       external     |           [tool layer]
        |          |         |
        v          v         v
     corpus -> document -> align -> assembly   [base layer]
"""
