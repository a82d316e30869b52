import pathlib

import pytest

from biorecords.core.settings import get_settings
from biorecords.sra import Read
from biorecords.uniprot import Protein, ProteinEvidence

GAPDH_SEQUENCE = (
    "MVKVGVNGFGRIGRLVTRAAFNSGKVDVVAINDPFIDLHYMVYMFQYDSTHGKFHGTVKAENGKLVINGKAITIFQ"
    "ERDPANIKWGDAGAEYVVESTGVFTTMEKAGAHLKGGAKRVIISAPSADAPMFVMGVNHEKYDNSLKIVSNASCTT"
    "NCLAPLAKVIHDHFGIVEGLMTTVHAITATQKTVDGPSGKLWRDGRGAAQNIIPASTGAAKAVGKVIPELNGKLTG"
    "MAFRVPTPNVSVVDLTCRLEKAAKYDDIKKVVKQASEGPLKGILGYTEDQVVSCDFNSATHSSTFDAGAGIALNDH"
    "FVKLISWYDNEFGYSNRVVDLMVHMASKE"
)

BSA_SEQUENCE = (
    "MKWVTFISLLLLFSSAYSRGVFRRDTHKSEIAHRFKDLGEEHFKGLVLIAFSQYLQQCPFDEHVKLVNELTEFAKT"
    "CVADESHAGCEKSLHTLFGDELCKVASLRETYGDMADCCEKQEPERNECFLSHKDDSPDLPKLKPDPNTLCDEFKA"
    "DEKKFWGKYLYEIARRHPYFYAPELLYYANKYNGVFQECCQAEDKGACLLPKIETMREKVLASSARQRLRCASIQK"
    "FGERALKAWSVARLSQKFPKAEFVEVTKLVTDLTKVHKECCHGDLLECADDRADLAKYICDNQDTISSKLKECCDK"
    "PLLEKSHCIAEVEKDAIPENLPPLTADFAEDKDVCKNYQEAKDAFLGSFLYEYSRRHPEYAVSVLLRLAKEYEATL"
    "EECCAKDDPHACYSTVFDKLKHLVDEPQNLIKQNCDQFEKLGEYGFQNALIVRYTRKVPQVSTPTLVEVSRSLGKV"
    "GTRCCTKPESERMPCTEDYLSLILNRLCVLHEKTPVSEKVTKCCTESLVNRRPCFSALTPDETYVPKAFDEKLFTF"
    "HADICTLPDTEKQIKKQTALVELLKHKPKATEEQLKTVMENFVAFVDKCCAADDKEACFAVEGPKLVVSTQTALA"
)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def data_dir() -> pathlib.Path:
    return pathlib.Path(__file__).parent / "data"


@pytest.fixture
def gapdh() -> Protein:
    return Protein(
        sequence_version=3,
        protein_evidence=ProteinEvidence.PROTEIN_LEVEL,
        mass=35780,
        length=333,
        gene="GAPDH",
        id="P46406",
        mnemonic="G3P_RABIT",
        name="Glyceraldehyde-3-phosphate dehydrogenase",
        organism="Oryctolagus cuniculus",
        proteome="UP000001811",
        sequence=GAPDH_SEQUENCE,
        taxonomy="9986",
        reviewed=True,
    )


@pytest.fixture
def bsa() -> Protein:
    return Protein(
        sequence_version=4,
        protein_evidence=ProteinEvidence.PROTEIN_LEVEL,
        mass=69293,
        length=607,
        gene="ALB",
        id="P02769",
        mnemonic="ALBU_BOVIN",
        name="Serum albumin",
        organism="Bos taurus",
        proteome="UP000009136",
        sequence=BSA_SEQUENCE,
        taxonomy="9913",
        reviewed=True,
    )


@pytest.fixture
def srr390728_2() -> Read:
    return Read(
        seq_id="SRR390728.2",
        description="2",
        length=72,
        sequence="AAGTAGGTCTCGTCTGTGTTTTCTACGAGCTTGTGTTCCAGCTGACCCACTCCCTGGGTGGGGGGACTGGGT",
        quality=";;;;;;;;;;;;;;;;;4;;;;3;393.1+4&&5&&;;;;;;;;;;;;;;;;;;;;;<9;<;;;;;464262",
    )


@pytest.fixture
def srr390728_3() -> Read:
    return Read(
        seq_id="SRR390728.3",
        description="3",
        length=72,
        sequence="CCAGCCTGGCCAACAGAGTGTTACCCCGTTTTTACTTATTTATTATTATTATTTTGAGACAGAGCATTGGTC",
        quality="-;;;8;;;;;;;,*;;';-4,44;,:&,1,4'./&19;;;;;;669;;99;;;;;-;3;2;0;+;7442&2/",
    )
