import gzip

import pytest

from lynchseq.pipeline.genes import GeneRegistry
from lynchseq.variation import scan


@pytest.fixture
def single_gene():
    return GeneRegistry({'GENE_A': 'chr1:100-200'})


@pytest.mark.parametrize(('pos', 'matched'), [
    (99, False),
    (100, True),
    (150, True),
    (200, True),
    (201, False),
])
def test_scan_range_boundaries(tmp_path, vcf_writer, single_gene, pos, matched):
    vcf_file = vcf_writer(str(tmp_path / 'S1.vcf.gz'), [('chr1', pos)])
    assert scan.scan(vcf_file, single_gene) == ({'GENE_A'} if matched else set())


@pytest.mark.parametrize('pos', [99, 100, 150, 200, 201])
def test_scan_other_chromosome_never_matches(tmp_path, vcf_writer, single_gene, pos):
    vcf_file = vcf_writer(str(tmp_path / 'S1.vcf.gz'), [('chr2', pos), ('1', pos)])
    assert scan.scan(vcf_file, single_gene) == set()


def test_scan_end_to_end_example(tmp_path, vcf_writer, single_gene):
    vcf_file = vcf_writer(str(tmp_path / 'S1.vcf.gz'), [('chr1', 150), ('chr2', 150)])
    assert scan.scan(vcf_file, single_gene) == {'GENE_A'}


def test_scan_does_not_assume_sorted_input(tmp_path, vcf_writer, registry):
    records = [('chr2', 1500), ('chr1', 5000), ('chr1', 150), ('chr1', 10)]
    vcf_file = vcf_writer(str(tmp_path / 'S1.vcf.gz'), records)
    assert scan.scan(vcf_file, registry) == {'GENE_A', 'GENE_B'}


def test_scan_plain_text_vcf(tmp_path, vcf_writer, registry):
    vcf_file = vcf_writer(str(tmp_path / 'S1.vcf'), [('chr2', 2000)])
    assert scan.scan(vcf_file, registry) == {'GENE_B'}


def test_scan_overlapping_genes(tmp_path, vcf_writer):
    registry = GeneRegistry([('MSH2', 'chr2:100-300'), ('EPCAM', 'chr2:50-150')])
    vcf_file = vcf_writer(str(tmp_path / 'S1.vcf.gz'), [('chr2', 120)])
    assert scan.scan(vcf_file, registry) == {'MSH2', 'EPCAM'}


def test_read_variants_skips_headers_and_blank_lines(tmp_path):
    vcf_file = str(tmp_path / 'S1.vcf.gz')
    with gzip.open(vcf_file, 'wt') as out_handle:
        out_handle.write('##fileformat=VCFv4.2\n#CHROM\tPOS\n\nchr1\t150\t.\tA\tG\n#late comment\n')
    assert list(scan.read_variants(vcf_file)) == [scan.VariantRecord('chr1', 150)]


def test_scan_missing_file_raises(tmp_path, registry):
    with pytest.raises(scan.ScanError):
        scan.scan(str(tmp_path / 'missing.vcf.gz'), registry)


def test_scan_corrupt_gzip_raises(tmp_path, registry):
    vcf_file = tmp_path / 'S1.vcf.gz'
    vcf_file.write_bytes(gzip.compress(b'#CHROM\tPOS\nchr1\t150\n' * 50)[:30])
    with pytest.raises(scan.ScanError):
        scan.scan(str(vcf_file), registry)


@pytest.mark.parametrize('line', ['chr1\tabc\t.\tA\tG\n', 'chr1\n'])
def test_scan_malformed_record_raises(tmp_path, registry, line):
    vcf_file = tmp_path / 'S1.vcf'
    vcf_file.write_text('#CHROM\tPOS\n' + line)
    with pytest.raises(scan.ScanError):
        scan.scan(str(vcf_file), registry)


@pytest.mark.parametrize('fname', ['S1.vcf.gz', 'S1.vcf'])
def test_scan_undecodable_bytes_raise(tmp_path, registry, fname):
    content = b'#CHROM\tPOS\nchr\xff1\t150\t.\tA\tG\n'
    vcf_file = str(tmp_path / fname)
    with (gzip.open(vcf_file, 'wb') if fname.endswith('.gz') else open(vcf_file, 'wb')) as out_handle:
        out_handle.write(content)
    with pytest.raises(scan.ScanError):
        scan.scan(vcf_file, registry)
