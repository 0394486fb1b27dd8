"""Gene-based annotation of variant calls with ANNOVAR.

Converts a VCF to ANNOVAR input, annotates against refGene and keeps
the annotated lines that mention any of the configured genes.
"""
import os
import re

from lynchseq import utils
from lynchseq.log import logger
from lynchseq.pipeline import config_utils
from lynchseq.provenance import do


def annovar_annotate(vcf_file, sample_id, config, out_dir=None, cancel=None):
    """Annotate a compressed VCF with ANNOVAR refGene gene annotations.

    Returns the full gene annotation and the subset mentioning configured genes.
    """
    out_dir = utils.safe_makedir(out_dir or config.dirs["annotated"])
    avinput_file = os.path.join(out_dir, "%s.avinput" % sample_id)
    out_base = os.path.join(out_dir, "%s.geneanno" % sample_id)
    annotated_file = "%s.variant_function" % out_base
    lynch_file = os.path.join(out_dir, "%s.lynch.txt" % sample_id)
    perl = config_utils.get_program("perl", config)
    convert_cmd = [perl, os.path.join(config.annovar_dir, "convert2annovar.pl"),
                   "-format", "vcf4old", vcf_file, "-outfile", avinput_file]
    do.run(convert_cmd, "Convert to ANNOVAR input: %s" % sample_id, None,
           [do.file_exists(avinput_file)], cancel=cancel)
    annotate_cmd = [perl, os.path.join(config.annovar_dir, "annotate_variation.pl"),
                    "-buildver", config.buildver, "-geneanno", "-dbtype", "refGene",
                    "-outfile", out_base, avinput_file, config.annovar_db]
    do.run(annotate_cmd, "Annotating with ANNOVAR: %s" % sample_id, None,
           [do.file_exists(annotated_file)], cancel=cancel)
    num_lines = filter_to_genes(annotated_file, [r.gene for r in config.genes], lynch_file)
    logger.info("ANNOVAR results saved: %s (%s lines in configured genes)" % (lynch_file, num_lines))
    return {"annotated": annotated_file, "lynch_annotated": lynch_file}

def filter_to_genes(in_file, genes, out_file):
    """Write lines of in_file mentioning any of the gene symbols, case insensitive.
    """
    gene_re = re.compile("|".join(re.escape(g) for g in genes), re.IGNORECASE) if genes else None
    count = 0
    with open(in_file) as in_handle:
        with open(out_file, "w") as out_handle:
            for line in in_handle:
                if gene_re and gene_re.search(line):
                    out_handle.write(line)
                    count += 1
    return count
