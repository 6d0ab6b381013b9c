"""
Sample deck files.

Templates offered to uploaders who are unsure what an export looks like.
Both describe the same main deck, so parsing either gives the same cards.
"""

SAMPLE_DEK = """<?xml version="1.0" encoding="utf-8"?>
<Deck xmlns:xsd="http://www.w3.org/2001/XMLSchema" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">
  <Cards>
    <Card>
      <Quantity>4</Quantity>
      <Name>Lightning Bolt</Name>
    </Card>
    <Card>
      <Quantity>4</Quantity>
      <Name>Counterspell</Name>
    </Card>
    <Card>
      <Quantity>2</Quantity>
      <Name>Force of Will</Name>
    </Card>
    <Card>
      <Quantity>1</Quantity>
      <Name>Black Lotus</Name>
    </Card>
  </Cards>
</Deck>"""

# Lines after the blank line are the sideboard
SAMPLE_TXT = """4 Lightning Bolt
4 Counterspell
2 Force of Will
1 Black Lotus

4 Pyroblast
3 Red Elemental Blast
2 Surgical Extraction"""


def create_sample_dek() -> str:
    """Sample structured (.dek) deck file."""
    return SAMPLE_DEK


def create_sample_txt() -> str:
    """Sample plain-text deck file with a sideboard section."""
    return SAMPLE_TXT
