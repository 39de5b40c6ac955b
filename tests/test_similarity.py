import pytest

from similarity import skill_overlap, title_similarity


class TestTitleSimilarity:
    def test_identical_titles(self):
        assert title_similarity('Data Engineer', 'Data Engineer') == 1.0

    def test_case_and_padding_are_ignored(self):
        assert title_similarity('Data Engineer', '  data engineer ') == 1.0

    def test_containment(self):
        assert title_similarity('Data Engineer', 'Senior Data Engineer') == 0.8
        assert title_similarity('Senior Data Engineer', 'Data Engineer') == 0.8

    def test_word_jaccard(self):
        assert title_similarity('Senior Data Engineer', 'Data Platform Engineer') == pytest.approx(0.5)

    def test_short_words_are_ignored(self):
        assert title_similarity('UX UI', 'QA IT') == 0.0

    def test_disjoint_titles(self):
        assert title_similarity('Recruiter', 'Backend Engineer') == 0.0

    @pytest.mark.parametrize('a, b', [('', 'Engineer'), ('Engineer', ''), (None, None)])
    def test_empty_titles_score_zero(self, a, b):
        assert title_similarity(a, b) == 0.0

    @pytest.mark.parametrize('a, b', [
        ('Product Manager', 'Group Product Manager'),
        ('Product Owner Growth', 'Technical Product Owner'),
        ('Software Engineer', 'Sales Manager'),
    ])
    def test_bounded_and_symmetric(self, a, b):
        score = title_similarity(a, b)
        assert 0.0 <= score <= 1.0
        assert score == title_similarity(b, a)


class TestSkillOverlap:
    def test_identical_lists(self):
        assert skill_overlap(['Python', 'SQL'], ['Python', 'SQL']) == 1.0

    def test_case_insensitive(self):
        assert skill_overlap(['python', ' SQL '], ['Python', 'sql']) == 1.0

    def test_partial_overlap(self):
        assert skill_overlap(['a', 'b', 'c'], ['b', 'c', 'd']) == pytest.approx(0.5)

    def test_disjoint(self):
        assert skill_overlap(['Go'], ['Rust']) == 0.0

    @pytest.mark.parametrize('a, b', [(None, ['Python']), (['Python'], None), ([], []), (['', ' '], [''])])
    def test_missing_or_blank_skills(self, a, b):
        assert skill_overlap(a, b) == 0.0
