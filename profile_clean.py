#!/usr/bin/env python3
"""Profile rinsehtml to find performance bottlenecks."""

import cProfile
import io
import pstats

from rinsehtml import Sanitizer

# Sample fragment
html = """
<div class="comment" onmouseover="track()">
    <p>Paragraph 1 with <a href="/users/7" target="_blank">a link</a> &amp; an entity</p>
    <p style="color:red">Paragraph 2<script>alert(document.cookie)</script></p>
    <applet code="Evil.class"><b>never shown</b></applet>
    <table border="1">
        <tr><td nowrap>Cell 1</td><td>Cell 2</td></tr>
        <tr><td>Cell 3</td><td><img src="img/4.png" alt="four"></td></tr>
    </table>
    <![CDATA[<i>marked</i><script>x</script>]]>
    <!-- a comment -->
</div>
""" * 100  # Repeat for more meaningful results

sanitizer = Sanitizer(base_uri="http://example.com/blog/")

# Profile
pr = cProfile.Profile()
pr.enable()

for _ in range(10):
    result = sanitizer.clean(html)
    _ = len(result)

pr.disable()

# Print stats
s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(50)  # Top 50 functions
print(s.getvalue())
