import os

from lynchseq.variation import annotation


def test_filter_to_genes(tmp_path):
    in_file = tmp_path / 'S1.geneanno.variant_function'
    in_file.write_text('exonic\tMLH1\tchr3\t3702100\n'
                       'intronic\tBRCA1\tchr17\t43044300\n'
                       'exonic\tmsh2\tchr2\t47650950\n'
                       'intergenic\tNONE\tchr1\t100\n')
    out_file = tmp_path / 'S1.lynch.txt'
    assert annotation.filter_to_genes(str(in_file), ['MLH1', 'MSH2'], str(out_file)) == 2
    assert out_file.read_text().splitlines() == ['exonic\tMLH1\tchr3\t3702100',
                                                 'exonic\tmsh2\tchr2\t47650950']


def test_filter_no_genes(tmp_path):
    in_file = tmp_path / 'in.txt'
    in_file.write_text('exonic\tMLH1\n')
    out_file = tmp_path / 'out.txt'
    assert annotation.filter_to_genes(str(in_file), [], str(out_file)) == 0
    assert out_file.read_text() == ''


def test_annovar_annotate(run_config, mocker):
    mocker.patch('lynchseq.pipeline.config_utils.get_program', return_value='perl')
    out_dir = run_config.dirs['annotated']

    def fake_run(cmd, *args, **kwargs):
        if cmd[1].endswith('annotate_variation.pl'):
            with open(os.path.join(out_dir, 'S1.geneanno.variant_function'), 'w') as out_handle:
                out_handle.write('exonic\tGENE_A\tchr1\t150\nexonic\tOTHER\tchr5\t1\n')
    run = mocker.patch('lynchseq.provenance.do.run', side_effect=fake_run)
    out = annotation.annovar_annotate('/work/S1.vcf.gz', 'S1', run_config)
    assert out == {'annotated': os.path.join(out_dir, 'S1.geneanno.variant_function'),
                   'lynch_annotated': os.path.join(out_dir, 'S1.lynch.txt')}
    convert_cmd, annotate_cmd = [c[0][0] for c in run.call_args_list]
    assert convert_cmd == ['perl', os.path.join(run_config.annovar_dir, 'convert2annovar.pl'),
                           '-format', 'vcf4old', '/work/S1.vcf.gz',
                           '-outfile', os.path.join(out_dir, 'S1.avinput')]
    assert annotate_cmd[2:] == ['-buildver', 'hg38', '-geneanno', '-dbtype', 'refGene',
                                '-outfile', os.path.join(out_dir, 'S1.geneanno'),
                                os.path.join(out_dir, 'S1.avinput'), run_config.annovar_db]
    with open(out['lynch_annotated']) as in_handle:
        assert in_handle.read() == 'exonic\tGENE_A\tchr1\t150\n'
