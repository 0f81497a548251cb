"""seo_scout.parser: разбор XML-документов sitemap."""
