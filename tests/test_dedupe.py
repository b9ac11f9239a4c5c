"""Tests for cross-source de-duplication and ordering."""
from jobscraper.dedupe import dedupe, sort_by_date_and_source
from jobscraper.models import Source


def test_duplicates_match_on_normalized_company_and_title(make_job):
    first = make_job("Product Manager", "Acme Ltd.", Source.DRUSHIM)
    again = make_job("product  manager", "ACME LTD", Source.LINKEDIN)
    other = make_job("Product Manager", "Beta", Source.LINKEDIN)

    assert dedupe([first, again, other]) == [first, other]


def test_first_occurrence_wins(make_job):
    linkedin = make_job(source=Source.LINKEDIN, url="https://www.linkedin.com/jobs/view/1")
    drushim = make_job(source=Source.DRUSHIM, url="https://www.drushim.co.il/job/1")
    assert dedupe([drushim, linkedin])[0].source is Source.DRUSHIM
    assert dedupe([linkedin, drushim])[0].source is Source.LINKEDIN


def test_dedupe_is_idempotent(make_job):
    jobs = [
        make_job("A", "X"), make_job("a", "x"), make_job("B", "X"), make_job("B!", "X"),
    ]
    once = dedupe(jobs)
    assert dedupe(once) == once
    assert len(once) == 2


def test_empty_input():
    assert dedupe([]) == []


def test_sort_newest_first_linkedin_on_ties(make_job):
    old_drushim = make_job("A", "X", Source.DRUSHIM, posting_days=3)
    old_linkedin = make_job("B", "X", Source.LINKEDIN, posting_days=3)
    fresh = make_job("C", "X", Source.DRUSHIM, posting_days=1)
    unknown = make_job("D", "X", Source.LINKEDIN)

    ordered = sort_by_date_and_source([unknown, old_drushim, old_linkedin, fresh])

    assert ordered == [fresh, old_linkedin, old_drushim, unknown]


def test_hebrew_titles_keep_distinct_keys(make_job):
    pm = make_job("מנהל/ת מוצר", "דרושים בע\"מ")
    qa = make_job("בודק/ת תוכנה", "דרושים בע\"מ")
    same_pm = make_job("מנהל/ת  מוצר!", "דרושים בעמ")
    assert dedupe([pm, qa, same_pm]) == [pm, qa]
